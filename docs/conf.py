# Sphinx configuration for the description-lint documentation.

import os
import sys

sys.path.insert(0, os.path.abspath("../src"))

from description_lint import __version__  # noqa: E402

# -- Project information -----------------------------------------------------
project = "Description Lint"
copyright = "2025, Description Lint Contributors"
author = "Description Lint Contributors"
release = __version__

# -- General configuration ---------------------------------------------------
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "myst_parser",
    "sphinxcontrib.mermaid",
]

# Google-style docstrings only
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_include_init_with_doc = True

myst_enable_extensions = ["colon_fence", "deflist"]
myst_fence_as_directive = ["mermaid"]

source_suffix = {".md": "markdown", ".rst": "restructuredtext"}
root_doc = "index"
exclude_patterns = ["_build"]

# -- Options for HTML output -------------------------------------------------
html_theme = "sphinx_rtd_theme"
html_title = f"description-lint {release}"

# -- Autodoc settings --------------------------------------------------------
autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "undoc-members": False,
    "exclude-members": "__weakref__,__slots__",
}
autodoc_typehints = "description"

# Frozen dataclasses document their fields twice
suppress_warnings = ["ref.python"]
