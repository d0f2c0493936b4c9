"""
barcode-bridge
==============

Узкий слой трансляции и диспетчеризации поверх движка распознавания и
генерации штрихкодов.

Этот пакет предоставляет:
    - decode: распознавание из файла (растр/SVG), data URI или base64
    - decode_pixels: распознавание из буфера яркости в памяти
    - encode: генерация PNG/JPEG/SVG байтов и (опционально) файла
    - Закрытый каталог форматов (QR, Aztec, DataMatrix, PDF417, MaxiCode,
      EAN/UPC, Code 39/93/128, Codabar, ITF, RSS)
    - Разреженные опции: неуказанное поле не ограничивает движок

Пример базового использования:
    >>> from barcode_bridge import decode, encode, BarcodeFormat
    >>>
    >>> png = encode("HELLO123", {"barcodeFormat": BarcodeFormat.QR_CODE, "width": 300})
    >>> result = decode("label.png", {"tryHarder": True})
    >>> if result is not None:
    ...     print(result.text, result.format.value)

Подмена движка (тесты, альтернативные бэкенды):
    >>> from barcode_bridge import SymbologyEngine, decode
    >>>
    >>> class MyEngine(SymbologyEngine):
    ...     ...
    >>> decode("label.png", engine=MyEngine())

Управление логированием:
    >>> import os
    >>> os.environ['BARCODE_BRIDGE_LOG_LEVEL'] = 'DEBUG'
    >>> os.environ['BARCODE_BRIDGE_LOG_FILE'] = 'logs/barcode_bridge.log'

Лицензия: MIT
Python: 3.10+
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Dict

# =============================================================================
# МЕТАДАННЫЕ ВЕРСИИ
# =============================================================================

__version__ = "0.1.0"
__author__ = "barcode-bridge developers"
__description__ = "Option-driven decode/encode bridge over a barcode symbology engine"
__license__ = "MIT"
__python_requires__ = ">=3.10"

# Компоненты семантической версии
VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

# =============================================================================
# ПРОВЕРКА ВЕРСИИ PYTHON
# =============================================================================

if sys.version_info < (3, 10):
    raise RuntimeError(
        f"barcode-bridge требует Python 3.10 или выше. "
        f"Текущая версия: {sys.version_info.major}."
        f"{sys.version_info.minor}.{sys.version_info.micro}"
    )

# =============================================================================
# КОНФИГУРАЦИЯ ЛОГИРОВАНИЯ
# =============================================================================

LOG_LEVEL_ENV_VAR = "BARCODE_BRIDGE_LOG_LEVEL"
LOG_FILE_ENV_VAR = "BARCODE_BRIDGE_LOG_FILE"

_PACKAGE_LOGGER = "barcode_bridge"


def _setup_logging() -> None:
    """
    Инициализировать логирование пакета.

    Настраивает логгер ``barcode_bridge`` с:
    - Консольным обработчиком (stderr) для WARNING и выше
    - Ротирующим файловым обработчиком, если задан BARCODE_BRIDGE_LOG_FILE
    - Форматом с временной меткой, уровнем, модулем и сообщением

    Уровень берётся из BARCODE_BRIDGE_LOG_LEVEL (DEBUG, INFO, WARNING,
    ERROR, CRITICAL; по умолчанию INFO). Повторные вызовы ничего не делают.
    """
    log_level_str = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    log_level = log_level_map.get(log_level_str, logging.INFO)

    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    if package_logger.handlers:
        return

    package_logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Консольный обработчик (stderr) - WARNING и выше
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    log_file = os.environ.get(LOG_FILE_ENV_VAR)
    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_path,
                maxBytes=10 * 1024 * 1024,  # 10 МБ
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)
        except OSError as e:
            package_logger.warning(
                "Could not initialise file logging at %s: %s. Console only.", log_file, e
            )

    package_logger.propagate = False


def get_logger(module_name: str) -> logging.Logger:
    """
    Получить логгер в пространстве имён ``barcode_bridge``.

    Аргументы:
        module_name: Обычно ``__name__``. Имена вне пакета получают префикс
            ``barcode_bridge.``; ``__main__`` становится ``barcode_bridge.main``.

    Пример:
        >>> logger = get_logger("my_plugin")
        >>> logger.name
        'barcode_bridge.my_plugin'
    """
    if module_name == _PACKAGE_LOGGER or module_name.startswith(_PACKAGE_LOGGER + "."):
        return logging.getLogger(module_name)
    if module_name == "__main__":
        return logging.getLogger(f"{_PACKAGE_LOGGER}.main")
    clean_name = module_name.lstrip(".")
    return logging.getLogger(f"{_PACKAGE_LOGGER}.{clean_name}")


# =============================================================================
# ПРОВЕРКА ЗАВИСИМОСТЕЙ
# =============================================================================

REQUIRED_DEPENDENCIES = ("pillow", "zxing-cpp", "qrcode", "python-barcode", "pdf417gen")
OPTIONAL_DEPENDENCIES = ("cairosvg", "treepoem")


def check_dependencies() -> Dict[str, bool]:
    """
    Проверить доступность библиотек движка.

    Обязательные: pillow, zxing-cpp, qrcode, python-barcode, pdf417gen.
    Опциональные: cairosvg (SVG на входе, нужна системная libcairo),
    treepoem (MaxiCode, RSS; нужен Ghostscript).

    Возвращает:
        Словарь «имя пакета -> доступен».

    Пример:
        >>> deps = check_dependencies()
        >>> if not deps['treepoem']:
        ...     print("MaxiCode/RSS генерация недоступна")
    """
    dependencies: Dict[str, bool] = {}

    try:
        import PIL  # noqa: F401

        dependencies["pillow"] = True
    except ImportError:
        dependencies["pillow"] = False

    try:
        import zxingcpp  # noqa: F401

        dependencies["zxing-cpp"] = True
    except ImportError:
        dependencies["zxing-cpp"] = False

    try:
        import qrcode  # noqa: F401

        dependencies["qrcode"] = True
    except ImportError:
        dependencies["qrcode"] = False

    try:
        import barcode  # noqa: F401

        dependencies["python-barcode"] = True
    except ImportError:
        dependencies["python-barcode"] = False

    try:
        import pdf417gen  # noqa: F401

        dependencies["pdf417gen"] = True
    except ImportError:
        dependencies["pdf417gen"] = False

    # OSError: пакет есть, но нет libcairo
    try:
        import cairosvg  # noqa: F401

        dependencies["cairosvg"] = True
    except (ImportError, OSError):
        dependencies["cairosvg"] = False

    try:
        import treepoem  # noqa: F401

        dependencies["treepoem"] = True
    except ImportError:
        dependencies["treepoem"] = False

    return dependencies


# =============================================================================
# ИНИЦИАЛИЗАЦИЯ ПАКЕТА
# =============================================================================

# Сначала логирование, затем всё остальное
_setup_logging()

_logger = get_logger(__name__)
_logger.debug("barcode-bridge v%s initialising, Python %s", __version__, sys.version)

from barcode_bridge.config import DEFAULT_CONFIG, get_config, load_config  # noqa: E402

_config = get_config()
_logger.debug("Active configuration: %s", _config)

_deps = check_dependencies()
_missing_required = [name for name in REQUIRED_DEPENDENCIES if not _deps.get(name)]
_missing_optional = [name for name in OPTIONAL_DEPENDENCIES if not _deps.get(name)]

if _missing_required:
    _logger.warning(
        "Missing required dependencies: %s. Install with: pip install %s",
        ", ".join(_missing_required),
        " ".join(_missing_required),
    )
if _missing_optional:
    _logger.info("Optional dependencies not available: %s", ", ".join(_missing_optional))

# =============================================================================
# ПУБЛИЧНЫЙ API
# =============================================================================

from barcode_bridge.codec.decoder import decode, decode_pixels  # noqa: E402
from barcode_bridge.codec.encoder import encode  # noqa: E402
from barcode_bridge.engine.base import SymbologyEngine  # noqa: E402
from barcode_bridge.exceptions import BarcodeBridgeError  # noqa: E402
from barcode_bridge.model import (  # noqa: E402
    BarcodeFormat,
    DecodeHintType,
    DecodeOptions,
    DecodeResult,
    EncodeHintType,
    EncodeOptions,
)

__all__ = [
    # Метаданные версии
    "__version__",
    "__author__",
    "__description__",
    "__license__",
    "__python_requires__",
    "VERSION_MAJOR",
    "VERSION_MINOR",
    "VERSION_PATCH",
    # Утилиты
    "get_logger",
    "load_config",
    "get_config",
    "check_dependencies",
    "DEFAULT_CONFIG",
    # Операции
    "decode",
    "decode_pixels",
    "encode",
    # Модель
    "BarcodeFormat",
    "DecodeHintType",
    "EncodeHintType",
    "DecodeOptions",
    "EncodeOptions",
    "DecodeResult",
    "SymbologyEngine",
    "BarcodeBridgeError",
]
