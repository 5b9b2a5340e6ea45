"""
loopmesh/errors.py
------------------
Exception types raised by the mesh and the refinement phases.
"""


class MeshTopologyError(ValueError):
    ''' Raised when the input mesh is not a triangulated, consistently
    oriented manifold (possibly with boundary).

    Attributes:
        entity (str): Kind of entity that triggered the fault ("vertex", "edge", "face").
        entity_id: Id (or edge key) of that entity.
    '''

    def __init__(self, message, entity=None, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        if entity is not None and entity_id is not None:
            message = f'{entity} {entity_id}: {message}'
        elif entity is not None:
            message = f'{entity}: {message}'
        super().__init__(message)


class MissingPositionError(RuntimeError):
    ''' A precomputed even/odd position was not available when it was needed. '''

    def __init__(self, entity, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f'No precomputed position for {entity} {entity_id}')


class StageOrderError(RuntimeError):
    ''' A refinement phase was requested out of order. '''
