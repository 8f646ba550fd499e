"""메타데이터 캐시: 세공/인챈트/세트 효과 어휘

자동완성·검증 보조용 읽기 전용 데이터. 조건 평가기는 이 데이터 없이 동작한다.

- 공통 데이터(인챈트 접두/접미, 세공)는 세션당 한 번 로드
- 세트 효과는 카테고리별로 한 번 로드 후 캐시
- 같은 카테고리의 진행 중인 로드는 중복 실행하지 않는다 (Task 공유)
- 파일 없음/깨진 JSON → 경고 로그 후 빈 어휘
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Callable, Optional

from src.core.auction.numeric import normalize_query
from src.core.auction.option_types import ENCHANT_PREFIX
from src.core.logging import get_logger

logger = get_logger(__name__)

JsonLoader = Callable[[Path], dict[str, Any]]


def read_json_file(path: Path) -> dict[str, Any]:
    """JSON 파일 → dict. 없거나 깨졌으면 빈 dict."""
    if not path.is_file():
        logger.warning("Metadata file not found: %s", path)
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Failed to read metadata %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Metadata %s is not an object, ignoring", path)
        return {}
    return data


def category_file_name(category: str) -> str:
    """카테고리 ID → 파일 이름 ("/"는 "_"로)."""
    return category.replace("/", "_") + ".json"


class MetadataCache:
    """메타데이터 로더 + 세션 캐시.

    파일 읽기는 asyncio.to_thread로 이벤트 루프 밖에서 수행한다.
    """

    def __init__(
        self,
        base_dir: str | Path,
        loader: Optional[JsonLoader] = None,
    ) -> None:
        self._base_dir = Path(base_dir)
        self._loader: JsonLoader = loader or read_json_file
        self._enchants: dict[str, dict[str, Any]] = {}
        self._reforges: dict[str, list[str]] = {}
        self._set_effects: dict[str, list[str]] = {}
        self._common_loaded = False
        self._common_task: Optional[asyncio.Task] = None
        self._inflight: dict[str, asyncio.Task] = {}

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    # ── 로드 ──────────────────────────────────────────────────

    async def _read(self, relative: str) -> dict[str, Any]:
        path = self._base_dir / relative
        try:
            return await asyncio.to_thread(self._loader, path)
        except (OSError, ValueError) as e:
            logger.warning("Metadata loader failed for %s: %s", path, e)
            return {}

    async def load_common(self) -> None:
        """인챈트 접두/접미 + 세공 어휘. 이미 로드됐거나 진행 중이면 재사용."""
        if self._common_loaded:
            return
        if self._common_task is None:
            self._common_task = asyncio.ensure_future(self._load_common())
        try:
            await self._common_task
        finally:
            if self._common_task is not None and self._common_task.done():
                self._common_task = None

    async def _load_common(self) -> None:
        prefix, suffix, reforges = await asyncio.gather(
            self._read("enchants/prefix.json"),
            self._read("enchants/suffix.json"),
            self._read("reforges/reforges.json"),
        )
        self._enchants = {
            "prefix": dict(prefix.get("enchants") or {}),
            "suffix": dict(suffix.get("enchants") or {}),
        }
        raw_reforges = reforges.get("reforges") or {}
        self._reforges = {
            str(category): [str(name) for name in names]
            for category, names in raw_reforges.items()
            if isinstance(names, list)
        }
        self._common_loaded = True
        logger.info(
            "Loaded enchant metadata (prefix=%d, suffix=%d), reforges for %d categories",
            len(self._enchants["prefix"]),
            len(self._enchants["suffix"]),
            len(self._reforges),
        )

    async def load_category(self, category: str) -> list[str]:
        """카테고리 세트 효과 어휘. 캐시 → 진행 중 Task → 새 로드 순."""
        if category in self._set_effects:
            return self._set_effects[category]
        return await self._category_task(category)

    def prefetch(self, category: str) -> Optional[asyncio.Task]:
        """백그라운드 로드 시작. 실행 중인 이벤트 루프 안에서만 호출한다.

        이미 캐시돼 있으면 None. 진행 중이면 같은 Task를 돌려준다.
        """
        if category in self._set_effects:
            return None
        return self._category_task(category)

    def _category_task(self, category: str) -> asyncio.Task:
        task = self._inflight.get(category)
        if task is None:
            task = asyncio.ensure_future(self._load_category(category))
            self._inflight[category] = task
            task.add_done_callback(lambda t: self._forget(category, t))
        return task

    def _forget(self, category: str, task: asyncio.Task) -> None:
        if self._inflight.get(category) is task:
            del self._inflight[category]

    async def _load_category(self, category: str) -> list[str]:
        data = await self._read(f"set_bonus/{category_file_name(category)}")
        effects = [str(e) for e in data.get("set_effects") or []]
        self._set_effects[category] = effects
        logger.info("Loaded %d set effects for category %s", len(effects), category)
        return effects

    def is_loading(self, category: str) -> bool:
        return category in self._inflight

    def invalidate(self, category: Optional[str] = None) -> None:
        """캐시 비우기. category 지정 시 해당 세트 효과만."""
        if category is None:
            self._set_effects.clear()
            self._enchants = {}
            self._reforges = {}
            self._common_loaded = False
            return
        self._set_effects.pop(category, None)

    # ── 조회 ──────────────────────────────────────────────────

    def enchant(self, sub_type: str, name: str) -> Optional[dict[str, Any]]:
        """인챈트 메타데이터 {rank, effects}. sub_type은 "접두"/"접미"."""
        source = "prefix" if sub_type == ENCHANT_PREFIX else "suffix"
        return self._enchants.get(source, {}).get(name)

    def reforge_options(self, category: str) -> list[str]:
        return list(self._reforges.get(category, []))

    def set_effects(self, category: str) -> list[str]:
        return list(self._set_effects.get(category, []))

    def search_enchants(self, sub_type: str, query: str) -> list[dict[str, Any]]:
        term = normalize_query(query)
        if not term:
            return []
        source = "prefix" if sub_type == ENCHANT_PREFIX else "suffix"
        return [
            {"name": name, "rank": info.get("rank") if isinstance(info, dict) else None}
            for name, info in self._enchants.get(source, {}).items()
            if term in name.lower()
        ]

    def search_reforge_options(self, category: str, query: str) -> list[str]:
        term = normalize_query(query)
        if not term:
            return []
        return [name for name in self.reforge_options(category) if term in name.lower()]

    def search_set_effects(self, category: str, query: str) -> list[str]:
        term = normalize_query(query)
        if not term:
            return []
        return [name for name in self.set_effects(category) if term in name.lower()]
