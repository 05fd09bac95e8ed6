# 📄 File: app/shared/infrastructure/external_apis/api_client.py

# 🧭 Purpose (Layman Explanation):
# A careful HTTP client that knows how to talk to outside plant identification services,
# giving up after a fixed time and turning any problem into a clear error message.

# 🧪 Purpose (Technical Summary):
# Generic async HTTP client built on aiohttp. Every call runs in its own ClientSession with a
# total timeout, is attempted exactly once, logs an external_api_call performance event, and
# maps non-2xx statuses, timeouts and transport errors onto ExternalAPIError / APITimeoutError.

# 🔗 Dependencies:
# - aiohttp: Async HTTP client
# - app.shared.core.exceptions: External API error types
# - app.shared.utils.logging: Performance logging

# 🔄 Connected Modules / Calls From:
# Used by: Plant.id client, PlantNet client

import asyncio
import time
from typing import Any, Dict, Optional, Union

import aiohttp
from aiohttp import ClientError, ClientSession, ClientTimeout

from app.shared.core.exceptions import APITimeoutError, ExternalAPIError
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)


class APIClient:
    """
    Generic async HTTP client for external API integrations.

    Features:
    - Per-call total timeout
    - Single attempt per call (callers decide what a failure means)
    - Status code and transport error mapping
    - Secret redaction in error messages and logs
    - Request performance logging
    """

    def __init__(
        self,
        base_url: str,
        api_name: str,
        api_key: Optional[str] = None,
        timeout: float = 30,
        headers: Optional[Dict[str, str]] = None
    ):
        """Initialize API client with configuration."""
        self.base_url = base_url.rstrip('/')
        self.api_name = api_name
        self.api_key = api_key
        self.timeout = timeout
        self._extra_headers = headers or {}

    def _get_default_headers(self) -> Dict[str, str]:
        """Get default headers for requests."""
        return {
            'User-Agent': f'NurseryIdentification/1.0 ({self.api_name}-client)',
            'Accept': 'application/json',
            **self._extra_headers,
        }

    def _build_url(self, endpoint: str) -> str:
        if not endpoint:
            return self.base_url
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _redact(self, text: str) -> str:
        """Strip the API key out of any text that may reach logs or callers."""
        if self.api_key and text:
            return text.replace(self.api_key, '***')
        return text

    async def _make_request(
        self,
        method: str,
        endpoint: str = '',
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        data: Optional[Union[aiohttp.FormData, bytes]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Make one HTTP request and return the decoded JSON body.

        Raises:
            APITimeoutError: If the call exceeds its total timeout
            ExternalAPIError: For non-2xx responses, transport errors and non-JSON bodies
        """
        url = self._build_url(endpoint)
        request_timeout = timeout or self.timeout

        request_headers = self._get_default_headers()
        if headers:
            request_headers.update(headers)

        request_kwargs: Dict[str, Any] = {'headers': request_headers}
        if params:
            request_kwargs['params'] = params
        if json_body is not None:
            request_kwargs['json'] = json_body
        if data is not None:
            request_kwargs['data'] = data

        start_time = time.perf_counter()
        status_code: Optional[int] = None
        success = False

        try:
            async with ClientSession(timeout=ClientTimeout(total=request_timeout)) as session:
                async with session.request(method, url, **request_kwargs) as response:
                    status_code = response.status
                    await self._handle_response_status(response)
                    payload = await self._parse_json(response)
                    success = True
                    return payload

        except asyncio.TimeoutError:
            raise APITimeoutError(self.api_name, request_timeout)
        except ClientError as e:
            reason = str(e) or type(e).__name__
            raise ExternalAPIError(
                self._redact(f"Transport error: {reason}"),
                api_name=self.api_name
            )
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.performance.log_external_api_call(
                api_name=self.api_name,
                endpoint=self._redact(url),
                method=method,
                status_code=status_code,
                duration_ms=duration_ms,
                success=success
            )

    async def _handle_response_status(self, response: aiohttp.ClientResponse) -> None:
        """Raise ExternalAPIError for any non-2xx response."""
        if 200 <= response.status < 300:
            return

        detail = ''
        try:
            body = await response.json(content_type=None)
            if isinstance(body, dict):
                detail = str(body.get('message') or body.get('error') or '')
            elif isinstance(body, str):
                detail = body
        except (ValueError, ClientError):
            detail = ''

        message = f"Request failed with status code {response.status}"
        if detail:
            message = f"{message} ({detail[:200]})"

        raise ExternalAPIError(
            self._redact(message),
            api_name=self.api_name,
            api_status_code=response.status
        )

    async def _parse_json(self, response: aiohttp.ClientResponse) -> Dict[str, Any]:
        try:
            body = await response.json(content_type=None)
        except ValueError:
            raise ExternalAPIError(
                "Invalid JSON in provider response",
                api_name=self.api_name,
                api_status_code=response.status
            )

        if not isinstance(body, dict):
            raise ExternalAPIError(
                "Unexpected provider response format",
                api_name=self.api_name,
                api_status_code=response.status
            )
        return body

    async def post(
        self,
        endpoint: str = '',
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None
    ) -> Dict[str, Any]:
        """Make a POST request with a JSON body."""
        return await self._make_request(
            'POST', endpoint, params=params, json_body=json_body, headers=headers, timeout=timeout
        )

    async def upload_file(
        self,
        endpoint: str,
        file_data: bytes,
        filename: str,
        content_type: str = 'image/jpeg',
        field_name: str = 'file',
        additional_fields: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Upload a file using multipart/form-data.

        List values in ``additional_fields`` become one repeated form part per item.
        """
        form = aiohttp.FormData()
        form.add_field(field_name, file_data, filename=filename, content_type=content_type)

        for key, value in (additional_fields or {}).items():
            values = value if isinstance(value, (list, tuple)) else [value]
            for item in values:
                form.add_field(key, str(item))

        return await self._make_request('POST', endpoint, params=params, data=form, timeout=timeout)


def create_api_client(
    api_name: str,
    base_url: str,
    api_key: Optional[str] = None,
    **kwargs
) -> APIClient:
    """Factory function to create configured API client."""
    return APIClient(
        base_url=base_url,
        api_name=api_name,
        api_key=api_key,
        **kwargs
    )
