"""Image proxy endpoint."""

from fastapi import APIRouter, Query
from fastapi.responses import Response

from .image_proxy import (
    ForbiddenImageUrlError,
    ImageFetchError,
    ImageNotFoundError,
    ImageProxyService,
)


def build_image_proxy_router(service: ImageProxyService) -> APIRouter:
    router = APIRouter(prefix="/api/image-proxy", tags=["media"])

    @router.get("")
    async def proxy_image(url: str | None = Query(None)) -> Response:
        if not url:
            return Response("Missing url parameter", status_code=400)
        try:
            image = await service.fetch(url)
        except ForbiddenImageUrlError:
            return Response("Forbidden", status_code=403)
        except ImageNotFoundError:
            return Response("Image not found", status_code=404)
        except ImageFetchError:
            return Response("Error fetching image", status_code=502)

        return Response(
            content=image.content,
            media_type=image.content_type,
            headers={
                "Cache-Control": "public, max-age=86400",
                "Access-Control-Allow-Origin": "*",
            },
        )

    return router
