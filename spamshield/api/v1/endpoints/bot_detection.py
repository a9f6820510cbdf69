import logging

from fastapi import APIRouter, UploadFile, File, HTTPException
from starlette.concurrency import run_in_threadpool

from spamshield.core.config import settings
from spamshield.schemas.detection import BotDetectionResp
from spamshield.services.voice_analyzer import AudioTooLongError, VoiceAnalyzer, VoiceAnalyzerConfig

router = APIRouter()
logger = logging.getLogger(__name__)

voice_analyzer = VoiceAnalyzer(
    VoiceAnalyzerConfig(
        min_seconds=settings.BOT_DETECTION_MIN_SECONDS,
        max_seconds=settings.BOT_DETECTION_MAX_SECONDS,
    )
)


@router.post("", response_model=BotDetectionResp)
async def bot_detection_endpoint(audio: UploadFile = File(...)):
    data = await audio.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty audio file")
    if len(data) > settings.MAX_AUDIO_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"Audio file too large (max {settings.MAX_AUDIO_BYTES} bytes)",
        )

    # decoding + framing is CPU bound
    try:
        result = await run_in_threadpool(voice_analyzer.analyze_bytes, data)
    except AudioTooLongError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(
        "bot detection file=%s is_bot=%s confidence=%.2f",
        audio.filename, result["is_bot"], result["confidence"],
    )
    return result
