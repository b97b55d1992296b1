"""TAXSIM-35 remote client.

TAXSIM-35 supports multiple access methods:
- SSH (recommended): ssh taxsim35@taxsimssh.nber.org
- HTTP: https://taxsim.nber.org/taxsim35/redirect.cgi

This client uses SSH by default and falls back to HTTP.

API Documentation: https://taxsim.nber.org/taxsim35/
"""

import io
import subprocess
import time

import pandas as pd
import requests

from ..errors import AdapterTimeoutError, CalculatorError
from .base import TaxCalculator
from .variable_mapping import TAXSIM_INPUT_COLUMNS


# TAXSIM-35 SSH endpoint (recommended method)
TAXSIM_SSH_HOST = "taxsim35@taxsimssh.nber.org"

# TAXSIM-35 HTTP endpoint (fallback)
TAXSIM_HTTP_URL = "https://taxsim.nber.org/taxsim35/redirect.cgi"

# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 120


def batch_to_csv(batch: pd.DataFrame) -> str:
    """Serialize a batch in TAXSIM's CSV input layout."""
    formatted = batch.copy()
    for col in TAXSIM_INPUT_COLUMNS:
        if col not in formatted.columns:
            formatted[col] = 0
    return formatted[TAXSIM_INPUT_COLUMNS].to_csv(index=False)


def parse_taxsim_csv(text: str) -> pd.DataFrame:
    """Parse TAXSIM CSV output into numeric columns."""
    if not text.strip():
        raise CalculatorError("Empty response from TAXSIM")
    if "<html" in text.lower()[:200]:
        raise CalculatorError(f"TAXSIM returned an HTML page: {text[:200]}")

    df = pd.read_csv(io.StringIO(text), skipinitialspace=True)
    df.columns = [str(c).strip() for c in df.columns]

    # Convert numeric columns
    for col in df.columns:
        if col != "state_name":
            df[col] = pd.to_numeric(df[col], errors="coerce")

    return df


class TaxSimClient(TaxCalculator):
    """Client for the TAXSIM-35 service.

    Usage:
        client = TaxSimClient(timeout=60)
        output = client.submit(batch)
        print(output["v25"])
    """

    name = "TAXSIM-35 (remote)"

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ):
        """Initialize the TAXSIM client.

        Args:
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            retry_delay: Delay between retries in seconds
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._session = requests.Session()

    def _submit_via_ssh(self, csv_data: str) -> str:
        """Submit CSV data to TAXSIM via SSH (recommended method)."""
        try:
            result = subprocess.run(
                [
                    "ssh",
                    "-T",
                    "-o", "StrictHostKeyChecking=no",
                    "-o", "BatchMode=yes",
                    "-o", f"ConnectTimeout={self.timeout}",
                    TAXSIM_SSH_HOST,
                ],
                input=csv_data,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise AdapterTimeoutError(f"TAXSIM SSH connection timed out after {self.timeout}s") from e
        except FileNotFoundError as e:
            raise CalculatorError("SSH client not available") from e

        if result.returncode != 0:
            raise CalculatorError(f"SSH command failed: {result.stderr}")

        return result.stdout

    def _submit_via_http(self, csv_data: str) -> str:
        """Submit CSV data to TAXSIM via HTTP (fallback method)."""
        files = {
            "txpydata.csv": ("txpydata.csv", csv_data, "text/csv"),
        }

        try:
            response = self._session.post(
                TAXSIM_HTTP_URL,
                files=files,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise AdapterTimeoutError(f"TAXSIM HTTP request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise CalculatorError(f"TAXSIM HTTP request failed: {e}") from e

        return response.text

    def _submit_request(self, csv_data: str) -> str:
        """Submit CSV data to TAXSIM with retries.

        Tries SSH first, then falls back to HTTP if SSH fails. When every
        attempt ended in a timeout the last AdapterTimeoutError is raised.
        """
        last_error = None

        for attempt in range(self.max_retries):
            try:
                return self._submit_via_ssh(csv_data)
            except CalculatorError:
                # SSH failed, try HTTP
                try:
                    return self._submit_via_http(csv_data)
                except CalculatorError as http_error:
                    last_error = http_error

            if attempt < self.max_retries - 1:
                time.sleep(self.retry_delay * (attempt + 1))

        if isinstance(last_error, AdapterTimeoutError):
            raise last_error
        raise CalculatorError(
            f"TAXSIM request failed after {self.max_retries} attempts: {last_error}"
        )

    def submit(self, batch: pd.DataFrame) -> pd.DataFrame:
        if batch.empty:
            return pd.DataFrame(columns=["taxsimid"])

        response_text = self._submit_request(batch_to_csv(batch))
        return parse_taxsim_csv(response_text)
