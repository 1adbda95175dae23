"""Job summary surface."""

from pathlib import Path

from prreviewer.exceptions import PlatformError


class SummaryWriter:
    """Appends markdown to the run's job summary file (GITHUB_STEP_SUMMARY)."""

    def __init__(self, path: str | Path | None) -> None:
        self.path = Path(path) if path else None

    def write(self, markdown: str) -> None:
        """
        Append markdown to the job summary.

        Raises:
            PlatformError: If no summary file is configured or it cannot be written
        """
        if self.path is None:
            raise PlatformError(
                "NO_SUMMARY_SURFACE",
                "GITHUB_STEP_SUMMARY is not set; no job summary to write to",
            )
        try:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(markdown)
                if not markdown.endswith("\n"):
                    fh.write("\n")
        except OSError as e:
            raise PlatformError("SUMMARY_WRITE_FAILED", f"{self.path}: {e}") from e
