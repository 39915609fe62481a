"""License field parsing and SPDX normalisation.

DESCRIPTION licenses use their own short names (``GPL-3``, ``GPL (>= 2)``,
``MIT + file LICENSE``), optionally combined with ``|``. Each component is
mapped to an SPDX identifier and the combined expression is validated with
the license-expression library.
"""

import logging
import re
from functools import lru_cache
from typing import Optional

from license_expression import ExpressionError, get_spdx_licensing

from description_lint.models import LicenseInfo

logger = logging.getLogger(__name__)

# Initialize SPDX licensing library for normalization
SPDX = get_spdx_licensing()

# DESCRIPTION short names and common variants mapped to SPDX identifiers
LICENSE_MAP = {
    "GPL-2": "GPL-2.0-only",
    "GPL-3": "GPL-3.0-only",
    "GPL (>= 2)": "GPL-2.0-or-later",
    "GPL (>= 2.0)": "GPL-2.0-or-later",
    "GPL (>= 3)": "GPL-3.0-or-later",
    "GPL (>= 3.0)": "GPL-3.0-or-later",
    "GPL": "GPL-2.0-or-later",
    "LGPL-2": "LGPL-2.0-only",
    "LGPL-2.1": "LGPL-2.1-only",
    "LGPL-3": "LGPL-3.0-only",
    "LGPL (>= 2)": "LGPL-2.0-or-later",
    "LGPL (>= 2.1)": "LGPL-2.1-or-later",
    "LGPL (>= 3)": "LGPL-3.0-or-later",
    "AGPL-3": "AGPL-3.0-only",
    "AGPL (>= 3)": "AGPL-3.0-or-later",
    "Apache License 2.0": "Apache-2.0",
    "Apache License (== 2.0)": "Apache-2.0",
    "Apache License (>= 2)": "Apache-2.0",
    "Apache License": "Apache-2.0",
    "Artistic-2.0": "Artistic-2.0",
    "Artistic License 2.0": "Artistic-2.0",
    "BSD_2_clause": "BSD-2-Clause",
    "BSD_3_clause": "BSD-3-Clause",
    "MIT": "MIT",
    "MPL-2.0": "MPL-2.0",
    "MPL (>= 2)": "MPL-2.0",
    "CC0": "CC0-1.0",
    "CC BY 4.0": "CC-BY-4.0",
    "CC BY-SA 4.0": "CC-BY-SA-4.0",
    "CC BY-NC 4.0": "CC-BY-NC-4.0",
    "CC BY-NC-SA 4.0": "CC-BY-NC-SA-4.0",
    "EUPL-1.2": "EUPL-1.2",
    "Unlimited": "LicenseRef-Unlimited",
}

# Licenses whose text ships with R; "+ file LICENSE" is unnecessary
NO_FILE_NEEDED = frozenset(
    {
        "GPL-2",
        "GPL-3",
        "LGPL-2.1",
        "LGPL-3",
        "AGPL-3",
        "Apache-2.0",
        "Apache License 2.0",
        "Artistic-2.0",
    }
)

# Template licenses that need a LICENSE file with year and copyright holder
FILE_REQUIRED = frozenset({"MIT", "BSD_2_clause", "BSD_3_clause"})

FILE_SUFFIX_PATTERN = re.compile(r"\s*\+\s*file\s+(?P<file>LICEN[CS]E)\s*$")

PLACEHOLDER_MARKERS = ("use_", "pick a", "what license")


def is_placeholder(text: str) -> bool:
    """True for template text left in the License field."""
    lowered = text.lower()
    return any(marker in lowered for marker in PLACEHOLDER_MARKERS)


@lru_cache(maxsize=256)
def normalize_component(component: str) -> Optional[str]:
    """Map one license component to an SPDX identifier.

    Args:
        component: A single alternative, e.g. ``"GPL (>= 2)"``.

    Returns:
        SPDX identifier or expression, or None if not recognised.
    """
    text = " ".join(component.split())
    if text in LICENSE_MAP:
        return LICENSE_MAP[text]

    try:
        parsed = SPDX.parse(text, validate=True)
    except ExpressionError as e:
        logger.debug("Could not normalize license component %r: %s", text, e)
        return None
    if parsed is None:
        return None
    return str(parsed)


def parse_license(value: str) -> LicenseInfo:
    """Parse a License field value.

    Args:
        value: Field value such as ``"MIT + file LICENSE"`` or
            ``"GPL-2 | GPL-3"``.

    Returns:
        LicenseInfo with components, the SPDX expression when every
        component is recognised, and any file reference.
    """
    raw = " ".join(value.split())
    file_reference = None
    alternatives: list[str] = []

    for part in raw.split("|"):
        part = part.strip()
        if not part:
            continue
        match = FILE_SUFFIX_PATTERN.search(part)
        if match:
            file_reference = match.group("file")
            part = part[: match.start()].strip()
            # A bare "file LICENSE" has no named component
            if not part:
                continue
        elif re.fullmatch(r"file\s+LICEN[CS]E", part):
            file_reference = part.split()[-1]
            continue
        alternatives.append(part)

    spdx_ids: list[str] = []
    unrecognised: list[str] = []
    for part in alternatives:
        spdx_id = normalize_component(part)
        if spdx_id is None:
            unrecognised.append(part)
        else:
            spdx_ids.append(spdx_id)

    expression = None
    if spdx_ids and not unrecognised:
        expression = " OR ".join(spdx_ids)

    return LicenseInfo(
        raw=raw,
        alternatives=tuple(alternatives),
        spdx_expression=expression,
        file_reference=file_reference,
        unrecognised=tuple(unrecognised),
    )
