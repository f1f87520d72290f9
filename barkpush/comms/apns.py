"""Deliver a notification to a set of devices through APNs."""

import asyncio
import logging
from typing import Iterable, Optional
from urllib.parse import quote

import httpx

from barkpush.comms.message import Msg
from barkpush.const import (
    APNS_DEVICE_PATH,
    APNS_HOST,
    APNS_PUSH_TYPE,
    DEFAULT_TIMEOUT,
    TRIVIAL_BODY_LENGTH,
)

logger = logging.getLogger(__name__)

__all__ = ["DispatchOutcome", "async_send", "send"]

# device token -> failure detail, a missing device was delivered
DispatchOutcome = dict[str, str]


def _fail_all(devices: Iterable[str], reason: str) -> DispatchOutcome:
    return {device: reason for device in devices}


def _loop_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def send(
    msg: Msg,
    topic: str,
    token: str,
    devices: Iterable[str],
    *,
    host: str = APNS_HOST,
    timeout: float = DEFAULT_TIMEOUT,
    max_concurrency: int = 1,
    client: Optional[httpx.AsyncClient] = None,
) -> DispatchOutcome:
    """Blocking wrapper around async_send() run with asyncio.run().

    If no loop can be started every device is reported as failed.
    """
    devices = set(devices)
    if _loop_running():
        reason = "send() cannot run inside an event loop, use async_send()"
        logger.error(f"Send failed: {reason}")
        return _fail_all(devices, reason)

    dispatch = async_send(
        msg,
        topic,
        token,
        devices,
        host=host,
        timeout=timeout,
        max_concurrency=max_concurrency,
        client=client,
    )
    try:
        return asyncio.run(dispatch)
    except OSError as e:
        dispatch.close()
        logger.error(f"Send failed: {e}")
        return _fail_all(devices, str(e))


async def async_send(
    msg: Msg,
    topic: str,
    token: str,
    devices: Iterable[str],
    *,
    host: str = APNS_HOST,
    timeout: float = DEFAULT_TIMEOUT,
    max_concurrency: int = 1,
    client: Optional[httpx.AsyncClient] = None,
) -> DispatchOutcome:
    """Push msg to every unique device.

    The message is serialized once and shared by all requests. Transport
    failures and non-2xx responses are collected per device and never stop
    the remaining pushes.

    Args:
        msg: Notification to deliver
        topic: Bundle id of the receiving app
        token: Bearer token signed for the gateway
        devices: Device tokens, duplicates are sent to once
        host: APNs host
        timeout: Per request timeout in seconds
        max_concurrency: Number of devices pushed to at once
        client: Optional HTTP client, closed by the caller

    Returns:
        Failure detail per device, empty when every push succeeded

    Raises:
        ConfigurationError: If msg cannot be serialized as configured
        EncryptionError: If encrypting the body fails
    """
    devices = sorted(set(devices))
    body = msg.serialize()

    if client is not None:
        return await _fan_out(client, devices, topic, token, body, host, max_concurrency)

    try:
        client = httpx.AsyncClient(http2=True, timeout=timeout)
    except (ImportError, OSError, ValueError) as e:
        logger.error(f"All {len(devices)} pushes failed: {e}")
        return _fail_all(devices, str(e))

    async with client:
        return await _fan_out(client, devices, topic, token, body, host, max_concurrency)


async def _fan_out(
    client: httpx.AsyncClient,
    devices: list[str],
    topic: str,
    token: str,
    body: bytes,
    host: str,
    max_concurrency: int,
) -> DispatchOutcome:
    headers = {
        "authorization": f"bearer {token}",
        "apns-push-type": APNS_PUSH_TYPE,
        "apns-topic": topic,
    }
    semaphore = asyncio.Semaphore(max_concurrency)

    async def push(device: str) -> tuple[str, Optional[str]]:
        path = APNS_DEVICE_PATH.format(device=quote(device, safe=""))
        url = f"https://{host}{path}"
        async with semaphore:
            return device, await _push(client, device, url, headers, body)

    results = await asyncio.gather(*(push(device) for device in devices))
    failed = {device: error for device, error in results if error is not None}

    if failed:
        logger.warning(f"{len(failed)} of {len(devices)} pushes failed")
    else:
        logger.debug(f"Pushed to {len(devices)} devices")
    return failed


async def _push(
    client: httpx.AsyncClient,
    device: str,
    url: str,
    headers: dict[str, str],
    body: bytes,
) -> Optional[str]:
    """Send one push, returning the failure detail or None on success."""
    try:
        request = client.build_request("POST", url, headers=headers, content=body)
        response = await client.send(request, stream=True)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(f"Send to {device} failed: {e!r}")
        return str(e) or repr(e)

    try:
        if response.is_success:
            return None

        status = str(response.status_code)
        try:
            content = await response.aread()
        except httpx.HTTPError as e:
            logger.warning(f"Reading the {status} response for {device} failed: {e!r}")
            return status + (str(e) or repr(e))

        detail = status + response.text if len(content) > TRIVIAL_BODY_LENGTH else status
        if response.status_code == 410:
            logger.debug(f"Device {device} is no longer registered: {detail}")
        else:
            logger.warning(f"Push to {device} rejected: {detail}")
        return detail
    finally:
        await response.aclose()
