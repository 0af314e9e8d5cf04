import time
from typing import Optional

import requests

from error_utils import network_error


def download_with_retry(url: str,
                        output_file: Optional[str] = None,
                        timeout: int = 30,
                        max_retries: int = 3,
                        retry_delay: float = 1.0,
                        context: str = "") -> Optional[requests.Response]:
    """
    Download content from URL, retrying timeouts, connection failures and 5xx responses.

    Args:
        url: URL to download from
        output_file: If provided, save content to this file
        timeout: Request timeout in seconds
        max_retries: Maximum number of retry attempts
        retry_delay: Initial delay between retries in seconds, doubled after each retry
        context: Context string for messages

    Returns:
        Response object if successful, None if all attempts failed
    """
    context_msg = f" ({context})" if context else ""
    attempts = max_retries + 1

    for attempt in range(attempts):
        print(f"Downloading {url}{context_msg}... (attempt {attempt + 1}/{attempts})")
        try:
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout:
            print(f"Request timed out after {timeout}s")
        except requests.exceptions.ConnectionError:
            print(f"Cannot connect to {url}")
        except requests.exceptions.HTTPError as e:
            print(f"Error: HTTP {e.response.status_code} - {e.response.reason}")
            if e.response.status_code < 500:
                print("This appears to be a client error (4xx) - not retrying")
                return None
        else:
            if output_file:
                with open(output_file, "wb") as f:
                    f.write(response.content)
                print(f"Successfully downloaded to {output_file}")
            return response

        if attempt < max_retries:
            print(f"Retrying in {retry_delay}s...")
            time.sleep(retry_delay)
            retry_delay *= 2

    print(f"Download failed after {attempts} attempts")
    return None


def download_or_exit(url: str,
                     output_file: Optional[str] = None,
                     timeout: int = 30,
                     max_retries: int = 3,
                     context: str = "") -> requests.Response:
    """
    Download content from URL or exit the application if it fails.

    Returns:
        Response object (never returns None - exits on failure)
    """
    response = download_with_retry(
        url=url,
        output_file=output_file,
        timeout=timeout,
        max_retries=max_retries,
        context=context
    )

    if response is None:
        network_error("downloading " + (context or "resource"), url,
                      f"no successful response after {max_retries + 1} attempts")

    return response
