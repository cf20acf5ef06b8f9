"""Envío manual de comandos a dispositivos."""

from fastapi import APIRouter, Depends, HTTPException

from ..core.domain.events import CommandEvent
from ..core.pipeline.command_publisher import CommandPublisher
from ..schemas import CommandIn, CommandSent
from .deps import get_publisher

router = APIRouter(prefix="/api/devices", tags=["commands"])


@router.post("/{device_id}/command", response_model=CommandSent)
def send_command(
    device_id: str,
    payload: CommandIn,
    publisher: CommandPublisher = Depends(get_publisher),
):
    """Publica un comando ad-hoc en <ns>/<device_id>/command."""
    ok = publisher.publish(CommandEvent(device_id=device_id, action=payload.command))
    if not ok:
        raise HTTPException(status_code=500, detail="Failed to send command")

    return CommandSent(
        message="Command sent",
        topic=publisher.topic_for(device_id),
        command=payload.command,
    )
