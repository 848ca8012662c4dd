"""Render compiled reference pages to MDX files.

The writer wraps the packaged ``reference_page.mdx.jinja`` template: front
matter, a "do not edit" note naming the source file, component imports
relative to the site root, and the body built from each page's section
fragments, inside the ``tsdoc`` container unless the page opts out. Output is
UTF-8 and parent directories are created as needed.

Example
-------
>>> from pathlib import Path
>>> from refdoc_pages.builder import ReferencePage
>>> from refdoc_pages.writer import ReferencePageWriter
>>> writer = ReferencePageWriter(Path("site"), Path("src/content/docs/docs"))
>>> page = ReferencePage(
...     "Bucket", "Reference doc", "bucket.ts", Path("component/aws/bucket.mdx")
... )
>>> writer.render(page).splitlines()[1]
'title: Bucket'
"""

from __future__ import annotations

import logging
import os
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from refdoc_pages._constants import PAGE_COMPONENT_IMPORTS

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from refdoc_pages.builder import ReferencePage

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "reference_page.mdx.jinja"


class ReferencePageWriter:
    """Render :class:`ReferencePage` values through Jinja and write them."""

    def __init__(
        self,
        output_dir: Path,
        docs_root: Path,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the writer and its Jinja environment.

        Parameters
        ----------
        output_dir : Path
            Site root; component imports are made relative to it.
        docs_root : Path
            Directory below ``output_dir`` that page paths are relative to.
        templates_dir : Path, optional
            Directory containing the page template; defaults to the package
            templates.
        """
        self.output_dir = output_dir
        self.docs_root = docs_root
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template(TEMPLATE_NAME)

    def target_path(self, page: ReferencePage) -> Path:
        """Return the file ``page`` is written to."""
        return self.output_dir / self.docs_root / page.output_path

    def import_root(self, page: ReferencePage) -> str:
        """Return the relative path from the page's directory to the site root.

        Examples
        --------
        >>> from refdoc_pages.builder import ReferencePage
        >>> writer = ReferencePageWriter(Path("."), Path("src/content/docs/docs"))
        >>> writer.import_root(ReferencePage("", "", "", Path("reference/config.mdx")))
        '../../../../..'
        """
        page_dir = (self.docs_root / page.output_path).parent
        return Path(os.path.relpath(Path(), page_dir)).as_posix()

    def render(self, page: ReferencePage) -> str:
        """Return the MDX text for ``page``."""
        return self.template.render(
            page=page,
            imports=PAGE_COMPONENT_IMPORTS,
            import_root=self.import_root(page),
        )

    def write(self, pages: cabc.Iterable[ReferencePage]) -> list[Path]:
        """Write every page and return the written paths in order."""
        written: list[Path] = []
        for page in pages:
            output_path = self.target_path(page)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(self.render(page), encoding="utf-8")
            logger.debug("Wrote %s", output_path)
            written.append(output_path)
        return written


__all__ = ["ReferencePageWriter"]
