"""CLI tool that runs the face pipeline on the local camera."""
import argparse
import asyncio
import sys
from typing import Optional

from visionassist.core.container import ServiceContainer
from visionassist.core.exceptions import VisionAssistError
from visionassist.core.logging import get_logger, setup_logging
from visionassist.domain.value_objects.recognition import DetectionTick

logger = get_logger(__name__)


def log_tick(tick: DetectionTick) -> None:
    """Print the annotations of one detection tick."""
    for i, annotation in enumerate(tick.annotations, 1):
        box = annotation.bounding_box
        logger.info(
            f"Face {i}",
            tick=tick.sequence,
            label=annotation.label or "-",
            distance=f"{annotation.distance:.3f}" if annotation.distance is not None else "-",
            confidence=f"{annotation.confidence:.2f}",
            position={
                "top": f"{box.top:.3f}",
                "left": f"{box.left:.3f}",
                "width": f"{box.width:.3f}",
                "height": f"{box.height:.3f}"
            }
        )


async def run_camera(
    duration: float,
    register: Optional[str] = None,
    user_id: Optional[str] = None,
) -> int:
    """
    Open the camera, optionally register the current face, then detect.

    Args:
        duration: Seconds to run the detection loop
        register: Name to register the face in frame under before detecting
        user_id: Tenant whose faces are loaded and registered

    Returns:
        int: Process exit code
    """
    container = ServiceContainer()
    await container.initialize()
    try:
        controller = container.create_face_pipeline(user_id=user_id)
        controller.on_annotations = log_tick
        async with controller:
            await controller.load()
            await controller.start_camera()

            if register:
                record = await controller.register(register)
                logger.info("Registered face", face_id=record.id, name=record.name)

            await controller.start_detection()
            await asyncio.sleep(duration)
            await controller.stop_detection()

            logger.info(
                "Detection finished",
                dropped_ticks=controller.dropped_ticks,
                discarded_results=controller.discarded_results
            )
        return 0
    except VisionAssistError as e:
        logger.error("Face pipeline failed", error=e.message, details=e.details)
        return 1
    finally:
        await container.cleanup()


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Recognize registered faces on the local camera")
    parser.add_argument(
        "--duration",
        type=float,
        default=10.0,
        help="Seconds to run detection (default: 10)"
    )
    parser.add_argument(
        "--register",
        metavar="NAME",
        help="Register the face currently in frame under NAME first"
    )
    parser.add_argument("--user-id", help="Tenant to load and register faces for")
    args = parser.parse_args()

    setup_logging()
    sys.exit(asyncio.run(run_camera(args.duration, args.register, args.user_id)))


if __name__ == "__main__":
    main()
