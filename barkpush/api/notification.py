"""Notification apis."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from barkpush.api.defs.request.notification_body import SendNotificationBody
from barkpush.api.defs.tags import Tags
from barkpush.comms.message import Msg
from barkpush.errors import ConfigurationError, CryptoError

logger = logging.getLogger(__name__)

router = APIRouter(tags=[Tags.notifications])


def build_message(body: SendNotificationBody) -> Msg:
    msg = Msg(body.title or "", body.body)

    if body.level is not None:
        msg.set_level(body.level)
    if body.badge is not None:
        msg.set_badge(body.badge)
    if body.sound is not None:
        msg.set_sound(body.sound)
    if body.icon is not None:
        msg.set_icon(body.icon)
    if body.group is not None:
        msg.set_group(body.group)
    if body.url is not None:
        msg.set_url(body.url)
    if body.copy_text is not None:
        msg.set_copy(body.copy_text)
    if body.auto_copy is not None:
        msg.set_auto_copy(body.auto_copy)
    if body.is_archive is not None:
        msg.set_is_archive(body.is_archive)
    if body.iv is not None:
        msg.set_iv(body.iv)
    if body.enc_type is not None:
        msg.set_enc_type(body.enc_type)
    if body.mode is not None:
        msg.set_mode(body.mode)
    if body.key is not None:
        msg.set_key(body.key)
    return msg


@router.post("/notifications/send")
async def send_notification(request: Request, body: SendNotificationBody):
    """Send a notification to the given devices.

    Responds with 200 when every device accepted the push, otherwise 502
    with the reason for each failed device.
    """
    bark = getattr(request.app, "bark", None)
    if bark is None:
        return JSONResponse(
            content=({"success": False, "message": "Bark client not available."}),
            status_code=503,
        )

    try:
        msg = build_message(body)
        failed = await bark.async_send(msg, body.devices)
    except ConfigurationError as e:
        return JSONResponse(
            content=({"success": False, "message": str(e)}),
            status_code=400,
        )
    except CryptoError as e:
        logger.error(f"Error sending notification: {e}")
        return JSONResponse(
            content=({"success": False, "message": f"Error sending notification: {e}"}),
            status_code=500,
        )

    device_count = len(set(body.devices))
    if failed:
        return JSONResponse(
            content=(
                {
                    "success": False,
                    "message": f"Notification failed for {len(failed)} of {device_count} device(s).",
                    "failed": failed,
                }
            ),
            status_code=502,
        )

    return JSONResponse(
        content=({"success": True, "message": f"Notification sent to {device_count} device(s)."}),
        status_code=200,
    )
