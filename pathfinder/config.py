"""Configuration for the minimal-path search."""

from dataclasses import dataclass


@dataclass
class SearchConfig:
    """Tunables for running minimal-path queries."""

    # Hard ceiling for the interpreter recursion limit during a search
    max_recursion_limit: int = 100_000

    # Frames reserved for callers above the explorer
    recursion_headroom: int = 64

    # Re-raise PathRecordError instead of reporting the partial result
    abort_on_record_error: bool = False

    # Worker processes for independent queries; 1 runs in-process
    parallelism: int = 1

    def required_recursion_limit(self, size: int) -> int:
        """Return the stack depth a search of ``size`` nodes needs below its caller.

        A simple path holds at most ``size`` nodes and each node on it costs
        one explorer frame.
        """
        return size + self.recursion_headroom


# Global configuration instance
SEARCH_CONFIG = SearchConfig()
