"""
Report document model: the typed, validated description the renderer consumes.

Untrusted JSON goes through validate_report() exactly once. Every optional
field is defaulted here so renderers never null-check configuration, and every
object shape is closed (extra keys are rejected, not ignored).
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from reporting.errors import ReportValidationError

Align = Literal["left", "center", "right"]
SpacerSize = Literal["xs", "sm", "md", "lg", "xl"]
TableCell = Union[StrictStr, StrictInt, StrictFloat, None]

_ASSET_SCHEMES = ("http://", "https://", "data:")


def _check_asset_ref(value: Optional[str]) -> Optional[str]:
    """Asset references are remote http(s) URLs or already-inline data URIs."""
    if value is None:
        return value
    if not value.startswith(_ASSET_SCHEMES):
        raise ValueError("must be an http(s) URL or a data: URI")
    return value


class _Closed(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


# --- Palette and assets ---


class Colors(_Closed):
    primary: str = "#0F172A"
    accent: str = "#2563EB"
    text: str = "#111827"
    muted: str = "#6B7280"
    border: str = "#E5E7EB"


class Assets(_Closed):
    logo: Optional[str] = None
    headerImage: Optional[str] = None
    footerImage: Optional[str] = None
    backgroundImage: Optional[str] = None

    @field_validator("logo", "headerImage", "footerImage", "backgroundImage")
    @classmethod
    def validate_ref(cls, v: Optional[str]) -> Optional[str]:
        return _check_asset_ref(v)


# --- Configs ---


class PageConfig(_Closed):
    size: Literal["A4", "Letter"] = "A4"
    orientation: Literal["portrait", "landscape"] = "portrait"
    margin: str = "20mm"


class FontConfig(_Closed):
    family: str = "Inter, ui-sans-serif, system-ui"
    base: str = "text-[12pt]"
    leading: str = "leading-relaxed"


class HeaderConfig(_Closed):
    visible: bool = True
    align: Align = "center"
    repeat: Literal["all", "first"] = "all"


class FooterConfig(_Closed):
    visible: bool = True
    text: str = "Page {{page}} of {{pages}}"
    align: Align = "center"


class DateConfig(_Closed):
    align: Align = "right"
    # Accepted and defaulted; rendering always uses "DD Mon YYYY".
    format: str = "DD MMM YYYY"


class TableConfig(_Closed):
    border: str = "border-2"
    striped: bool = True
    compact: bool = False


class Configs(_Closed):
    page: PageConfig = Field(default_factory=PageConfig)
    font: FontConfig = Field(default_factory=FontConfig)
    header: HeaderConfig = Field(default_factory=HeaderConfig)
    footer: FooterConfig = Field(default_factory=FooterConfig)
    date: DateConfig = Field(default_factory=DateConfig)
    table: TableConfig = Field(default_factory=TableConfig)


# --- Component props ---


class TextProps(_Closed):
    text: str


class DateProps(_Closed):
    value: Optional[str] = None


class EmptyProps(_Closed):
    pass


class SpacerProps(_Closed):
    size: SpacerSize = "md"


class SignatureProps(_Closed):
    label: Optional[str] = None
    lines: Annotated[int, Field(strict=True, ge=1, le=5)] = 1


class TableProps(_Closed):
    title: Optional[str] = None
    headers: List[str]
    rows: List[List[TableCell]]
    notes: Optional[str] = None


class ImageProps(_Closed):
    url: str
    alt: Optional[str] = None
    caption: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        # Empty url marks an image whose fetch failed during hydration.
        if v == "":
            return v
        return _check_asset_ref(v)


# --- Components (closed tagged union on "type") ---


class _ComponentBase(_Closed):
    id: Optional[str] = None
    style: Optional[Dict[str, str]] = None

    def slot(self, name: str) -> Optional[str]:
        """Style override for one semantic slot (title, wrapper, ...)."""
        if not self.style:
            return None
        return self.style.get(name)


class HeaderComponent(_ComponentBase):
    type: Literal["header"]
    props: TextProps


class SubheaderComponent(_ComponentBase):
    type: Literal["subheader"]
    props: TextProps


class DateComponent(_ComponentBase):
    type: Literal["date"]
    props: DateProps = Field(default_factory=DateProps)


class ParaComponent(_ComponentBase):
    type: Literal["para"]
    props: TextProps


class DividerComponent(_ComponentBase):
    type: Literal["divider"]
    props: EmptyProps = Field(default_factory=EmptyProps)


class SpacerComponent(_ComponentBase):
    type: Literal["spacer"]
    props: SpacerProps = Field(default_factory=SpacerProps)


class PagebreakComponent(_ComponentBase):
    type: Literal["pagebreak"]
    props: EmptyProps = Field(default_factory=EmptyProps)


class SignatureComponent(_ComponentBase):
    type: Literal["signature"]
    props: SignatureProps = Field(default_factory=SignatureProps)


class FooterTextComponent(_ComponentBase):
    type: Literal["footerText"]
    props: TextProps


class TableComponent(_ComponentBase):
    type: Literal["table"]
    props: TableProps


class ImageComponent(_ComponentBase):
    type: Literal["image"]
    props: ImageProps


COMPONENT_TYPES = (
    "header",
    "subheader",
    "date",
    "para",
    "divider",
    "spacer",
    "pagebreak",
    "signature",
    "footerText",
    "table",
    "image",
)

Component = Annotated[
    Union[
        HeaderComponent,
        SubheaderComponent,
        DateComponent,
        ParaComponent,
        DividerComponent,
        SpacerComponent,
        PagebreakComponent,
        SignatureComponent,
        FooterTextComponent,
        TableComponent,
        ImageComponent,
    ],
    Field(discriminator="type"),
]


class Report(_Closed):
    """Root document. Built fresh per request, immutable once validated."""
    company: str
    reportName: str
    colors: Colors = Field(default_factory=Colors)
    assets: Assets = Field(default_factory=Assets)
    configs: Configs = Field(default_factory=Configs)
    components: List[Component] = Field(min_length=1)


def _issue_path(loc: tuple[Any, ...]) -> str:
    """Dotted field path; the union tag pydantic inserts after a component index is dropped."""
    parts = list(loc)
    if (
        len(parts) > 2
        and parts[0] == "components"
        and isinstance(parts[1], int)
        and parts[2] in COMPONENT_TYPES
    ):
        del parts[2]
    return ".".join(str(part) for part in parts)


def validate_report(raw: Any) -> Report:
    """
    Validate untrusted input into a fully-defaulted Report.

    Raises ReportValidationError listing every violated field path.
    """
    if isinstance(raw, Report):
        return raw
    try:
        return Report.model_validate(raw)
    except ValidationError as e:
        issues = [
            {
                "path": _issue_path(err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ]
        raise ReportValidationError(issues) from e
