"""
Compiled template representation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import jinja2


@dataclass(frozen=True)
class CompiledTemplate:
    """Represents a compiled template.

    Statically compiled templates carry the executable Jinja2 template. In
    dynamic mode ``template`` is None and the source is compiled by the
    executing compiler on every render.
    """
    name: str
    source: str
    static: bool
    template: Optional[jinja2.Template] = field(default=None, repr=False, compare=False)
    compiled_at: datetime = field(default_factory=datetime.now, compare=False)

    @property
    def is_executable(self) -> bool:
        return self.template is not None
