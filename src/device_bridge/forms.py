"""
Form configuration lookup.

The host asks for a form schema per form type when rendering its UI:

  CFG   device configuration form    (no schema yet)
  VCR   device voucher form          (no schema yet)
  SVCR  service access point voucher (bundled JSON schema)
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from device_bridge.errors import UnsupportedFormType

logger = logging.getLogger(__name__)

SERVICE_VOUCHER_FORM = Path(__file__).parent / "form_json" / "form_service_voucher.json"


class FormType:
    CFG = "CFG"
    VCR = "VCR"
    SVCR = "SVCR"


def get_form_config(form_type: str, asset_path: Optional[Union[str, Path]] = None) -> Optional[Any]:
    if form_type in (FormType.CFG, FormType.VCR):
        return None
    if form_type == FormType.SVCR:
        return read_form_config(asset_path or SERVICE_VOUCHER_FORM)
    raise UnsupportedFormType(form_type)


def read_form_config(path: Union[str, Path]) -> Optional[Any]:
    """Read a bundled form schema. A missing or corrupt file yields None.

    The file is read on every call so an updated asset is picked up without a
    restart.
    """
    try:
        with open(path, encoding="utf-8") as f:
            info = json.load(f)
    except OSError as e:
        logger.warning("form config %s could not be opened: %s", path, e)
        return None
    except json.JSONDecodeError as e:
        logger.warning("form config %s is not valid JSON: %s", path, e)
        return None
    logger.info("form config %s loaded", path)
    return info
