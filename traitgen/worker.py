# traitgen/worker.py
from PySide6.QtCore import QThread, Signal

from traitgen.generator import DEFAULT_MAX_ATTEMPTS, iter_combinations
from traitgen.rarity import analyze_distribution


# =========================================================
# Worker thread for trait generation
# =========================================================
class GenerationWorker(QThread):
    """
    Runs one generation off the caller's thread.

    Cancellation: call cancel() (or requestInterruption() on a running
    thread); it is checked once per sampling attempt, duplicates included, and
    whatever was produced so far is reported in done_signal.
    """

    log_signal = Signal(str)
    progress_signal = Signal(int, int)
    done_signal = Signal(object)

    def __init__(self, catalog, settings, parent=None):
        super().__init__(parent)
        self.catalog = catalog
        self.settings = dict(settings)
        self._cancel_requested = False

    def cancel(self):
        self._cancel_requested = True
        self.requestInterruption()

    def _stop_requested(self):
        return self._cancel_requested or self.isInterruptionRequested()

    def run(self):
        size = int(self.settings.get("collection_size", 0))
        combinations = []
        cancelled = False

        for combination in iter_combinations(
            self.catalog,
            size,
            self.settings.get("seed", 0),
            avoid_duplicates=self.settings.get("avoid_duplicates", True),
            respect_rarity=self.settings.get("respect_rarity", True),
            max_attempts=self.settings.get("max_attempts", DEFAULT_MAX_ATTEMPTS),
            log_callback=self.log_signal.emit,
            should_stop=self._stop_requested,
        ):
            combinations.append(combination)
            self.progress_signal.emit(len(combinations), size)

        if self._stop_requested():
            cancelled = True
            self.log_signal.emit(f"⚠️ Cancelled after {len(combinations)} of {size}.")
        else:
            self.log_signal.emit(f"✅ Generated {len(combinations)} combinations")

        self.done_signal.emit({
            "combinations": combinations,
            "distribution": analyze_distribution(combinations),
            "cancelled": cancelled,
            "requested": size,
        })
