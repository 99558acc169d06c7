"""Level-row tokenization shared by the sounding parsers.

A RowLayout says which token (or fixed-width column) feeds which profile
field, at what scale, and which row widths are acceptable.
"""

from dataclasses import dataclass, field
from enum import StrEnum

from airsounds.errors import ParseError
from airsounds.ingest.units import FEET_PER_METER, scale_to_float, scale_to_int
from airsounds.models.sounding import ProfileBuilder

PROFILE_FIELDS = (
    "pressure",
    "height",
    "temperature",
    "dew_point",
    "wind_direction",
    "wind_speed",
)
THERMO_FIELDS = PROFILE_FIELDS[:4]


class Tokenizer(StrEnum):
    WHITESPACE = "whitespace"
    FIXED = "fixed"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    column: int
    scale: float = 1.0
    integer: bool = True

    def convert(self, token: str) -> int | float:
        if self.integer:
            return scale_to_int(token, self.scale)
        return scale_to_float(token, self.scale)


@dataclass(frozen=True)
class RowLayout:
    fields: tuple[FieldSpec, ...]
    # Accepted row shapes: whitespace token count -> fields present in such rows.
    # Fixed-column rows must leave exactly one of these field sets non-blank.
    widths: dict[int, tuple[str, ...]] = field(default_factory=dict)
    column_width: int = 7


# GSD text: "type pres hght temp dwpt wdir wspd", tenths of hPa / deg C, meters.
GSD_LAYOUT = RowLayout(
    fields=(
        FieldSpec("pressure", 1, 0.1),
        FieldSpec("height", 2, FEET_PER_METER),
        FieldSpec("temperature", 3, 0.1),
        FieldSpec("dew_point", 4, 0.1),
        FieldSpec("wind_direction", 5),
        FieldSpec("wind_speed", 6),
    ),
    widths={7: PROFILE_FIELDS},
)

# UWYO TEXT:LIST: PRES HGHT TEMP DWPT RELH MIXR DRCT SKNT THTA THTE THTV.
# Levels without wind leave DRCT/SKNT blank, so they split into 9 tokens.
TEXT_LIST_LAYOUT = RowLayout(
    fields=(
        FieldSpec("pressure", 0),
        FieldSpec("height", 1, FEET_PER_METER),
        FieldSpec("temperature", 2, integer=False),
        FieldSpec("dew_point", 3, integer=False),
        FieldSpec("wind_direction", 6),
        FieldSpec("wind_speed", 7),
    ),
    widths={11: PROFILE_FIELDS, 9: THERMO_FIELDS},
)


def append_row(
    builder: ProfileBuilder,
    line: str,
    layout: RowLayout,
    tokenizer: Tokenizer = Tokenizer.WHITESPACE,
) -> None:
    """Parse one level row and append its values to builder.

    Values are converted before anything is appended, so a bad row leaves the
    builder untouched.
    """
    if tokenizer == Tokenizer.FIXED:
        values = _fixed_values(line, layout)
    else:
        values = _whitespace_values(line, layout)
    for name, value in values:
        getattr(builder, name).append(value)


def _whitespace_values(line: str, layout: RowLayout) -> list[tuple[str, int | float]]:
    tokens = line.split()
    present = layout.widths.get(len(tokens))
    if present is None:
        raise ParseError(
            f"expected one of {sorted(layout.widths)} fields, got {len(tokens)}", line
        )
    values = []
    for field_spec in layout.fields:
        if field_spec.name not in present:
            continue
        try:
            values.append((field_spec.name, field_spec.convert(tokens[field_spec.column])))
        except ParseError as e:
            raise ParseError(f"failed loading {field_spec.name} ({e})", line) from e
    return values


def _fixed_values(line: str, layout: RowLayout) -> list[tuple[str, int | float]]:
    w = layout.column_width
    cells = {
        field_spec.name: line[field_spec.column * w : (field_spec.column + 1) * w].strip()
        for field_spec in layout.fields
    }
    present = {name for name, cell in cells.items() if cell}
    if not any(present == set(names) for names in layout.widths.values()):
        blank = [name for name, cell in cells.items() if not cell]
        raise ParseError(f"unexpected blank cells: {', '.join(blank)}", line)
    values = []
    for field_spec in layout.fields:
        cell = cells[field_spec.name]
        if not cell:
            continue
        try:
            values.append((field_spec.name, field_spec.convert(cell)))
        except ParseError as e:
            raise ParseError(f"failed loading {field_spec.name} ({e})", line) from e
    return values
