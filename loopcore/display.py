"""
loopcore/display.py
-------------------
Console output for a refinement run: a banner, phase sections, a table of
mesh counts per stage, and a timed footer.
"""
import time


class RefinementDisplay:
    def __init__(self, title, context_info, width=70):
        """
        Args:
            title (str): What is being run (e.g. "Loop Subdivision")
            context_info (str): Input description (e.g. "bunny.obj | 2503 faces")
        """
        self.title = title
        self.context = context_info
        self.width = width
        self.start_time = time.time()
        self._columns = []

    def header(self):
        print("-" * self.width)
        print(f"loopmesh :: {self.title}")
        print(f"Input    :: {self.context}")
        print("-" * self.width + "\n")

    def section(self, name):
        print(f"--- {name} ---")

    def setup_stats_columns(self, headers, widths=None):
        """ Prints the table heading; `widths` defaults to 12 per column. """
        if widths is None:
            widths = [12] * len(headers)
        self._columns = list(zip(headers, widths))

        heading = "  ".join(name.rjust(w) for name, w in self._columns)
        print("")
        print(heading)
        print("-" * len(heading))

    def log_stats(self, *values):
        ''' One row per stage: a label followed by integer counts. '''
        if len(values) != len(self._columns):
            raise ValueError(f"Expected {len(self._columns)} values, got {len(values)}: {values}")
        print("  ".join(str(v).rjust(w) for v, (_, w) in zip(values, self._columns)))

    def success(self, message):
        elapsed = time.time() - self.start_time
        print(f"\n>> {message} ({elapsed:.2f}s)\n")

    def error(self, message):
        print(f"\n!! ERROR: {message} !!\n")
