"""
Загрузка ассетов тизера: модель логотипа (STL) и карта окружения.

Загрузка идёт в пуле потоков и возвращает concurrent.futures.Future.
Результат забирает кадровый цикл (TeaserApp.tick), поэтому граф сцены
меняется только из его потока.

Поддерживаются локальные пути и URL вида file://. Сетевые схемы
отклоняются с AssetLoadError.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple, Union
from urllib.parse import unquote, urlparse

import numpy as np
from stl import mesh as stl_mesh

from logo_teaser.logging_config import log_timing
from logo_teaser.scene import Group, Mesh

logger = logging.getLogger(__name__)


class AssetLoadError(Exception):
    """Ошибка при загрузке или разборе ассета."""


@dataclass(frozen=True)
class EnvironmentMap:
    """Raw environment image; decoding is left to the renderer."""
    path: Path
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)


def resolve_asset_path(url: Union[str, Path]) -> Path:
    """Преобразовать путь или file:// URL в локальный путь.

    Raises:
        AssetLoadError: для сетевых и прочих неподдерживаемых схем.
    """
    if isinstance(url, Path):
        return url

    parsed = urlparse(url)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    # Windows drive letters parse as a one-letter scheme
    if parsed.scheme and len(parsed.scheme) > 1:
        raise AssetLoadError(f"Unsupported asset URL scheme {parsed.scheme!r}: {url}")
    return Path(url)


def read_stl(filepath: Path) -> Tuple[np.ndarray, np.ndarray]:
    """Прочитать STL и вернуть уникальные вершины и грани.

    Дедупликация вершин выполняется по координатам, округлённым
    до 6 знаков после запятой.

    Returns:
        vertices: массив (N, 3), float64.
        faces:    массив (M, 3), int32.

    Raises:
        AssetLoadError: если файл не найден, повреждён или пуст.
    """
    if not filepath.is_file():
        raise AssetLoadError(f"Файл не найден: {str(filepath)!r}")

    try:
        model = stl_mesh.Mesh.from_file(str(filepath))
    except Exception as exc:
        raise AssetLoadError(f"Не удалось прочитать STL-файл {str(filepath)!r}: {exc}") from exc

    if len(model.vectors) == 0:
        raise AssetLoadError(f"STL-файл {str(filepath)!r} не содержит треугольников.")

    vertices: List[Tuple[float, float, float]] = []
    faces: List[Tuple[int, int, int]] = []
    vertex_index: Dict[Tuple[float, float, float], int] = {}

    for triangle in model.vectors:
        face = []
        for raw_vertex in triangle:
            key = tuple(round(float(c), 6) for c in raw_vertex)
            if key not in vertex_index:
                vertex_index[key] = len(vertices)
                vertices.append(key)
            face.append(vertex_index[key])
        faces.append(tuple(face))

    return np.array(vertices, dtype=np.float64), np.array(faces, dtype=np.int32)


def load_model_sync(url: Union[str, Path]) -> Group:
    """Загрузить модель и обернуть её в группу, готовую к вставке в rig."""
    path = resolve_asset_path(url)
    with log_timing(logger, "Loading model", url=str(url)) as info:
        vertices, faces = read_stl(path)
        info["vertices"] = len(vertices)
        info["faces"] = len(faces)

    root = Group(name=path.stem)
    root.add(Mesh(vertices, faces, name=path.stem))
    logger.info(
        "Модель загружена: %s (%d вершин, %d граней)",
        path.name, len(vertices), len(faces),
    )
    return root


def load_environment_sync(url: Union[str, Path]) -> EnvironmentMap:
    """Read an environment image as raw bytes."""
    path = resolve_asset_path(url)
    with log_timing(logger, "Loading environment", url=str(url)):
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise AssetLoadError(f"Не удалось прочитать карту окружения {str(path)!r}: {exc}") from exc
    if not data:
        raise AssetLoadError(f"Карта окружения {str(path)!r} пуста.")
    return EnvironmentMap(path=path, data=data)


class AssetPipeline:
    """Asynchronous asset loading on a small thread pool.

    Args:
        max_workers: Pool size; the teaser loads at most two assets at once
    """

    def __init__(self, max_workers: int = 2):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="asset")

    def load_model(self, url: Union[str, Path]) -> "Future[Group]":
        return self._executor.submit(load_model_sync, url)

    def load_environment(self, url: Union[str, Path]) -> "Future[EnvironmentMap]":
        return self._executor.submit(load_environment_sync, url)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> 'AssetPipeline':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
