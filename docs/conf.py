"""Sphinx configuration for libmilight documentation."""

from __future__ import annotations

import os
import pathlib
import sys
from datetime import datetime

# Make the package importable without installing it
sys.path.insert(0, os.path.abspath(".."))

project = "libmilight"
author = "libmilight contributors"
copyright = f"{datetime.now().year}, {author}"

from libmilight import __version__  # noqa: E402

version = __version__
release = __version__

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx.ext.viewcode",
    "sphinx.ext.napoleon",
    "sphinx_autodoc_typehints",
    "myst_parser",
]

templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}

master_doc = "index"

autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "show-inheritance": True,
}
autodoc_typehints = "description"
autodoc_class_signature = "separated"

# Google-style docstrings
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_include_init_with_doc = True
napoleon_use_param = True
napoleon_use_rtype = True
napoleon_attr_annotations = True

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
}

typehints_defaults = "comma"
always_document_param_types = True

myst_enable_extensions = [
    "colon_fence",
    "deflist",
]

html_theme = "sphinx_rtd_theme"
html_theme_options = {
    "navigation_depth": 3,
    "collapse_navigation": False,
}

html_static_path = ["_static"]
pathlib.Path(__file__).parent.joinpath("_static").mkdir(exist_ok=True)

nitpicky = False
