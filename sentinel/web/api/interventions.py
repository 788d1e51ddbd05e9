"""Voice intervention API endpoints."""

import math

from fastapi import APIRouter, HTTPException, status

from ...shared.db.models import VoiceIntervention
from ...shared.db.repositories import (
    AnomalyRepository,
    SpeakerZoneRepository,
    VoiceInterventionRepository,
)
from ...shared.schemas.common import DataEnvelope
from ...shared.schemas.intervention import BroadcastRequest, VoiceInterventionResponse
from .deps import DbSession, Changes, run_dependent_write

router = APIRouter()

# Rough speaking rate used to estimate broadcast length
CHARS_PER_SECOND = 10


def broadcast_duration(message: str) -> int:
    return math.ceil(len(message) / CHARS_PER_SECOND)


@router.post("/voice/broadcast", response_model=DataEnvelope[VoiceInterventionResponse])
async def broadcast_voice(
    body: BroadcastRequest,
    db: DbSession,
    changes: Changes,
):
    """
    Broadcast a live voice message to a speaker zone.

    The linked anomaly is stamped with the intervention afterwards; that
    update is best effort and never undoes the broadcast record.
    """
    zone = await SpeakerZoneRepository(db).get_by_code(body.zone)
    if not zone:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Speaker zone not found",
        )

    intervention = await VoiceInterventionRepository(db).create(VoiceIntervention(
        anomaly_id=body.anomaly_id,
        broadcast_type="live_voice",
        zone=zone.zone_name,
        speaker_ids=zone.speaker_ids,
        message_text=body.message_text,
        admin_id=body.admin_id,
        admin_name=body.admin_name,
        duration_seconds=broadcast_duration(body.message_text),
    ))
    await db.commit()
    await changes.publish("voice_interventions", "insert", intervention.id)

    if body.anomaly_id:
        updated = await run_dependent_write(
            db,
            "anomaly intervention",
            lambda: AnomalyRepository(db).record_intervention(
                body.anomaly_id, "voice", body.admin_name
            ),
        )
        if updated:
            await changes.publish("anomalies", "update", body.anomaly_id)

    return DataEnvelope(data=VoiceInterventionResponse.model_validate(intervention))
