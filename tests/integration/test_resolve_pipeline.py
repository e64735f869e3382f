"""End-to-end tests through the composition root.

``lifespan`` builds the real object graph (diskcache on tmp_path, httpx
client, extractor registry); only the remote hosts are mocked.
"""

from __future__ import annotations

import html
import json
import re
from typing import Callable

import pytest
import respx

from streamshelf.domain.errors import NoProviderMatchError, NoUsableQualityError
from streamshelf.infrastructure.config import AppConfig
from streamshelf.interfaces.composition import lifespan

pytestmark = pytest.mark.integration


def _okru_page(videos: list[dict[str, object]]) -> str:
    options = json.dumps({"flashvars": {"metadata": json.dumps({"videos": videos})}})
    return f'<div data-module="OKVideo" data-options="{html.escape(options)}"></div>'


def _vk_page(params: dict[str, str]) -> str:
    player = json.dumps({"params": [params]})
    return f"<script>var playerParams = {player};</script>"


class TestResolvePipeline:
    async def test_registry_exposes_providers(self, app_config: AppConfig) -> None:
        async with lifespan(app_config) as state:
            assert state.extractor_registry.supported_providers == ["okru", "vkvideo"]
            assert state.config is app_config

    async def test_resolves_okru_page(
        self, app_config: AppConfig, respx_mock: respx.MockRouter
    ) -> None:
        page = "https://ok.ru/video/42"
        route = respx_mock.get(page).respond(
            200,
            text=_okru_page(
                [
                    {"name": "mobile", "url": "https://vd.okcdn.ru/mobile.mp4"},
                    {"name": "hd", "url": "https://vd.okcdn.ru/hd.mp4"},
                ]
            ),
        )

        async with lifespan(app_config) as state:
            stream = await state.content_repository.resolve_video(page)

        assert stream.url == "https://vd.okcdn.ru/hd.mp4"
        assert stream.provider == "okru"
        assert stream.headers["Referer"] == page
        assert route.calls.last.request.headers["User-Agent"] == "IntegrationAgent/1.0"

    async def test_resolves_vk_page(
        self, app_config: AppConfig, respx_mock: respx.MockRouter
    ) -> None:
        page = "https://vk.com/video-1_2"
        route = respx_mock.get(page).respond(
            200,
            text=_vk_page(
                {"url480": "https://vkvd.example/480.mp4", "hls": "https://vkvd/h.m3u8"}
            ),
        )

        async with lifespan(app_config) as state:
            stream = await state.content_repository.resolve_video(page)

        assert stream.quality == "mp4_480"
        assert re.fullmatch(
            r"remixdsid=[A-Za-z0-9]{15}", route.calls.last.request.headers["Cookie"]
        )

    async def test_vk_page_without_playable_format(
        self, app_config: AppConfig, respx_mock: respx.MockRouter
    ) -> None:
        page = "https://vkvideo.ru/video-1_3"
        respx_mock.get(page).respond(200, text=_vk_page({"dash_sep": "https://d"}))

        async with lifespan(app_config) as state:
            with pytest.raises(NoUsableQualityError):
                await state.content_repository.resolve_video(page)

    async def test_unsupported_host(self, app_config: AppConfig) -> None:
        async with lifespan(app_config) as state:
            with pytest.raises(NoProviderMatchError):
                await state.content_repository.resolve_video("https://youtube.com/x")

    async def test_catalog_and_settings_persist_across_lifespans(
        self,
        app_config: AppConfig,
        respx_mock: respx.MockRouter,
        catalog_url: str,
        other_catalog_url: str,
        catalog_json: Callable[..., str],
    ) -> None:
        respx_mock.get(catalog_url).respond(200, text=catalog_json(1.0))
        async with lifespan(app_config) as state:
            snapshot = await state.content_repository.get_catalog()
            assert snapshot.origin == "network"
            await state.content_repository.set_catalog_url(other_catalog_url)

        respx_mock.get(other_catalog_url).respond(200, text=catalog_json(3.0))
        async with lifespan(app_config) as state:
            assert await state.content_repository.get_catalog_url() == other_catalog_url
            snapshot = await state.content_repository.get_catalog()
            assert (snapshot.origin, snapshot.catalog.version) == ("network", 3.0)

            await state.settings.reset_catalog_url()
            assert await state.content_repository.get_catalog_url() == catalog_url
