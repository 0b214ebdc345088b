"""
Точка входа: отрисовка тизера логотипа в последовательность SVG-кадров.

Использование:
    python main.py <model.stl> [--output-dir DIR] [--frames N] [--fps F]

Пример:
    python main.py logo.stl --output-dir out --frames 120
    python main.py logo.stl --pointer 0.5 -0.5 --frames 240   # курсор в правом верхнем углу
    python main.py logo.stl --config teaser.json --log-json teaser.log.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from logo_teaser import config as cfg
from logo_teaser.app import TeaserApp
from logo_teaser.host import HostPage, PointerEvent
from logo_teaser.logging_config import setup_logging
from logo_teaser.project_config import (
    CONFIG_FILENAME,
    TeaserConfig,
    create_sample_config,
    load_config,
    merge_configs,
)

logger = logging.getLogger("logo_teaser.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Отрисовка 3D-логотипа, следящего за курсором, в SVG-кадры.",
    )
    parser.add_argument("model", nargs="?", help="STL-файл логотипа (путь или file:// URL)")
    parser.add_argument("--env", default=None, help="Карта окружения (HDR)")
    parser.add_argument("--output-dir", default=".", help="Каталог страницы; кадры пишутся в three-mount/")
    parser.add_argument("--frames", type=int, default=60, help="Число кадров (по умолчанию 60)")
    parser.add_argument("--fps", type=float, default=cfg.DEFAULT_FPS, help="Частота кадров")
    parser.add_argument("--width", type=int, default=cfg.DEFAULT_VIEWPORT[0])
    parser.add_argument("--height", type=int, default=cfg.DEFAULT_VIEWPORT[1])
    parser.add_argument(
        "--pointer", nargs=2, type=float, metavar=("X", "Y"), default=None,
        help="Положение курсора в [-1, 1] (центр экрана = 0 0), подаётся в первом кадре",
    )
    parser.add_argument("--config", default=None, help=f"Файл конфигурации ({CONFIG_FILENAME})")
    parser.add_argument("--init-config", action="store_true", help="Создать пример конфигурации и выйти")
    parser.add_argument("-v", "--verbose", action="store_true", help="Подробный лог (DEBUG)")
    parser.add_argument("--log-json", default=None, help="Дублировать лог в JSON-файл")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        json_file=args.log_json,
    )

    if args.init_config:
        create_sample_config(args.config or CONFIG_FILENAME)
        return 0

    cli = TeaserConfig()
    cli.assets.model = args.model or ""
    cli.assets.environment = args.env or ""
    config = merge_configs(load_config(args.model, args.config), cli)
    if not config.assets.model:
        logger.error("Модель не задана: укажите STL-файл или assets.model в конфигурации")
        return 2

    page = HostPage(Path(args.output_dir), args.width, args.height)
    app = TeaserApp(page, config)
    if not app.start():
        return 1

    try:
        app.wait_for_assets()
        if args.pointer is not None:
            px, py = args.pointer
            page.dispatch(PointerEvent(
                client_x=(px / 2 + 0.5) * page.viewport.width,
                client_y=(py / 2 + 0.5) * page.viewport.height,
                timestamp=app.clock(),
            ))
        app.run(args.frames, args.fps)
    finally:
        app.stop()

    logger.info("Готово: %d кадров в %s", app.renderer.frames_rendered, app.mount.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
