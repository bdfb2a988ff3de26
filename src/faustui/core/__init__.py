# どこで: `src/faustui/core/__init__.py`。
# 何を: 宣言収集・ツリー構築の公開エイリアスをまとめる。

from .builder import build_widgets
from .collector import DeclarationCollector
from .dict_parser import parse_metadata_dict
from .errors import (
    CollectorConsumedError,
    FaustUiError,
    MetadataDictError,
    MetadataError,
    StructureError,
)
from .labels import decode_label
from .metadata import (
    Metadata,
    MetadataEvent,
    MetadataKey,
    NumDisplayStyle,
    NumParamStyle,
    NumParamStyleKind,
    WidgetScale,
    fold_display_metadata,
    fold_param_metadata,
    parse_metadata_event,
)
from .widgets import (
    Box,
    BoxLayout,
    Button,
    ButtonLayout,
    DeclKind,
    DspWidget,
    NumDisplay,
    NumDisplayLayout,
    NumParam,
    NumParamLayout,
    WidgetDecl,
    declaration_events,
    find_by_label,
    iter_leaves,
    iter_widgets,
)
from .zone import Zone, ZoneBuffer, ZoneId

__all__ = [
    "build_widgets",
    "DeclarationCollector",
    "parse_metadata_dict",
    "CollectorConsumedError",
    "FaustUiError",
    "MetadataDictError",
    "MetadataError",
    "StructureError",
    "decode_label",
    "Metadata",
    "MetadataEvent",
    "MetadataKey",
    "NumDisplayStyle",
    "NumParamStyle",
    "NumParamStyleKind",
    "WidgetScale",
    "fold_display_metadata",
    "fold_param_metadata",
    "parse_metadata_event",
    "Box",
    "BoxLayout",
    "Button",
    "ButtonLayout",
    "DeclKind",
    "DspWidget",
    "NumDisplay",
    "NumDisplayLayout",
    "NumParam",
    "NumParamLayout",
    "WidgetDecl",
    "declaration_events",
    "find_by_label",
    "iter_leaves",
    "iter_widgets",
    "Zone",
    "ZoneBuffer",
    "ZoneId",
]
