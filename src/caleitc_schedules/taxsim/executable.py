"""Run a local TAXSIM-35 executable on a batch."""

import os
import platform
import subprocess
from pathlib import Path
from typing import Optional

import pandas as pd

from ..errors import AdapterTimeoutError, CalculatorError
from .base import TaxCalculator
from .client import batch_to_csv, parse_taxsim_csv


class TaxSimExecutable(TaxCalculator):
    """Run TAXSIM-35 from a downloaded executable."""

    name = "TAXSIM-35 (local)"

    def __init__(self, taxsim_path: Optional[Path] = None, timeout: Optional[int] = None):
        """
        Initialize the local TAXSIM runner.

        Args:
            taxsim_path: Path to TAXSIM executable. Auto-detected if not provided.
            timeout: Seconds to wait for the executable (None waits indefinitely)
        """
        self.taxsim_path = Path(taxsim_path) if taxsim_path else self._detect_taxsim_executable()
        self.timeout = timeout
        self._validate_executable()

    def _detect_taxsim_executable(self) -> Path:
        """Detect TAXSIM executable based on OS."""
        system = platform.system().lower()

        if system == "darwin":
            exe_name = "taxsim35-osx.exe"
        elif system == "windows":
            exe_name = "taxsim35-windows.exe"
        elif system == "linux":
            exe_name = "taxsim35-unix.exe"
        else:
            raise CalculatorError(f"Unsupported operating system: {system}")

        search_paths = [
            Path.cwd() / "resources" / "taxsim" / exe_name,
            Path.cwd() / "code" / "ado" / exe_name,
            Path.home() / ".taxsim" / exe_name,
        ]

        for path in search_paths:
            if path.exists():
                return path

        raise CalculatorError(
            f"TAXSIM executable '{exe_name}' not found. "
            f"Download from https://taxsim.nber.org/taxsim35/ and place in one of:\n"
            + "\n".join(f"  - {p}" for p in search_paths)
        )

    def _validate_executable(self):
        """Ensure executable exists and is runnable."""
        if not self.taxsim_path.exists():
            raise CalculatorError(f"TAXSIM executable not found: {self.taxsim_path}")

        # Make executable on Unix
        if platform.system().lower() != "windows":
            os.chmod(self.taxsim_path, 0o755)

    def submit(self, batch: pd.DataFrame) -> pd.DataFrame:
        try:
            result = subprocess.run(
                [str(self.taxsim_path)],
                input=batch_to_csv(batch),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise AdapterTimeoutError(f"TAXSIM executable timed out after {self.timeout}s") from e

        if result.returncode != 0:
            raise CalculatorError(f"TAXSIM execution failed: {result.stderr}")

        return parse_taxsim_csv(result.stdout)
