"""
Pytest configuration and shared fixtures.

The fixtures write a miniature copy of the ARIA source tree into tmp_path:
a primary specification, roleInfo.js, HTML-AAM, AccName and two extension
modules.
"""

import logging
import os
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from aria_kb.core.config_loader import PathSettings, PipelineSettings
from aria_kb.core.logging_config import ROOT_LOGGER


PRIMARY_HTML = """<!DOCTYPE html>
<html lang="en">
<head><title>Accessible Rich Internet Applications (WAI-ARIA) 1.3</title></head>
<body>
<section id="role_definitions">

<div class="role" id="roletype">
  <p class="role-description">The base role from which all other roles inherit.</p>
  <table class="def">
    <tbody>
      <tr><th>Is Abstract:</th><td>True</td></tr>
      <tr><th>Subclass Roles:</th><td><rref>structure</rref>, <rref>widget</rref></td></tr>
      <tr><th>Supported States and Properties:</th>
          <td><ul><li><pref>aria-label</pref></li><li><sref>aria-busy</sref></li></ul></td></tr>
    </tbody>
  </table>
</div>

<div class="role" id="checkbox">
  <p class="role-description">A checkable input that has three possible values.</p>
  <table class="def">
    <tbody>
      <tr><th>Is Abstract:</th><td></td></tr>
      <tr><th>Superclass Role:</th><td><rref>input</rref></td></tr>
      <tr><th>Subclass Roles:</th><td><rref>switch</rref></td></tr>
      <tr><th>Related Concepts:</th><td><code>&lt;input type="checkbox"&gt;</code></td></tr>
      <tr><th>Required States and Properties:</th><td><sref>aria-checked</sref></td></tr>
      <tr><th>Name From:</th><td>contents, author</td></tr>
      <tr><th>Accessible Name Required:</th><td>True</td></tr>
      <tr><th>Children are Presentational:</th><td>True</td></tr>
    </tbody>
  </table>
</div>

<div class="role" id="switch">
  <p class="role-description">A type of checkbox that represents on/off values.</p>
  <table class="def">
    <tbody>
      <tr><th>Superclass Role:</th><td><rref>checkbox</rref></td></tr>
      <tr><th>Required States and Properties:</th><td><sref>aria-checked</sref></td></tr>
    </tbody>
  </table>
</div>

<div class="role" id="alert">
  <p class="role-description">A type of live region with important information.</p>
  <table class="def">
    <tbody>
      <tr><th>Superclass Role:</th><td><rref>section</rref></td></tr>
      <tr><th>Implicit Value for Role:</th><td>Default for aria-live is assertive; aria-atomic: true</td></tr>
    </tbody>
  </table>
</div>

<div class="role" id="button">
  <p class="role-description">An input that allows for user-triggered actions.</p>
  <table class="def">
    <tbody>
      <tr><th>Superclass Role:</th><td><rref>command</rref></td></tr>
      <tr><th>Supported States and Properties:</th><td><sref>aria-pressed</sref> <pref>aria-haspopup</pref></td></tr>
    </tbody>
  </table>
</div>

<div class="role" id="banner">
  <p class="role-description">A landmark that contains mostly site-oriented content.</p>
</div>

<div class="role" id="dialog">
  <p class="role-description">A descendant window of the primary window.</p>
</div>

<div class="role" id="tablist">
  <p class="role-description">A list of tab elements.</p>
</div>

<div class="role" id="article">
  <p class="role-description">A section of a page that forms an independent part.</p>
  <table class="def">
    <tbody>
      <tr><th>Superclass Role:</th><td><rref>document</rref></td></tr>
    </tbody>
  </table>
</div>

<div class="role">
  <p class="role-description">A block without an identifier.</p>
</div>

</section>

<section id="state_prop_def">

<div class="state" id="aria-checked">
  <p class="state-description">Indicates the current "checked" state.</p>
  <table class="def">
    <tbody>
      <tr><th>Used in Roles:</th><td><rref>checkbox</rref>, <rref>menuitemcheckbox</rref></td></tr>
      <tr><th>Inherits into Roles:</th><td><rref>switch</rref></td></tr>
      <tr><th>Value:</th><td>token: true | false | mixed | undefined</td></tr>
      <tr><th>Default Value:</th><td>undefined</td></tr>
    </tbody>
  </table>
</div>

<div class="property" id="aria-label">
  <p class="property-description">Defines a string value that labels the element.</p>
  <table class="def">
    <tbody>
      <tr><th>Used in Roles:</th><td>All elements of the base markup</td></tr>
      <tr><th>Value:</th><td>string</td></tr>
    </tbody>
  </table>
</div>

<div class="state" id="aria-busy">
  <p class="state-description">Indicates an element is being modified.</p>
  <table class="def">
    <tbody>
      <tr><th>Used in Roles:</th><td>Any element</td></tr>
      <tr><th>Value:</th><td>true/false</td></tr>
    </tbody>
  </table>
</div>

<div class="property" id="aria-haspopup">
  <p class="property-description">Indicates the availability of a popup.</p>
  <table class="def">
    <tbody>
      <tr><th>Used in Roles:</th><td><rref>button</rref>, <rref>link</rref></td></tr>
      <tr><th>Related Concepts:</th><td><a href="#popup">popup</a></td></tr>
    </tbody>
  </table>
</div>

<div class="property">
  <p class="property-description">A property block without an identifier.</p>
</div>

</section>
</body>
</html>
"""

ROLE_INFO_JS = """// Role information generated from the ARIA specification
var roleInfo = {
  "roletype": {
    "name": "roletype",
    "parentRoles": [],
    "localprops": [
      {"is": "property", "name": "aria-label", "required": false, "disallowed": false, "deprecated": false},
      {"is": "state", "name": "aria-busy", "required": false, "disallowed": false, "deprecated": false}
    ]
  },
  "input": {
    "name": "input",
    "parentRoles": ["roletype"],
    "localprops": [{"is": "state", "name": "aria-disabled", "required": false}]
  },
  checkbox: {
    name: 'checkbox',
    parentRoles: ['input'],
    localprops: [{is: 'state', name: 'aria-checked', required: true}],
  },
  "switch": {
    "name": "switch",
    "parentRoles": ["checkbox"],
    "localprops": [{"is": "state", "name": "aria-checked", "required": true}]
  },
  "button": {
    "name": "button",
    "parentRoles": ["roletype"],
    "allprops": [
      {"is": "state", "name": "aria-pressed", "required": false},
      {"is": "property", "name": "aria-haspopup", "required": false}
    ]
  },
  /* alert inherits from section, which has no entry of its own */
  "alert": {
    "name": "alert",
    "parentRoles": ["section", "roletype"],
    "localprops": [{"is": "property", "name": "aria-live", "required": false}]
  }
};
"""

HTML_AAM_HTML = """<!DOCTYPE html>
<html><head><title>HTML Accessibility API Mappings</title></head>
<body>
<table>
  <caption>HTML Element Role Mappings</caption>
  <thead><tr><th>HTML Element</th><th>WAI-ARIA</th></tr></thead>
  <tbody>
    <tr><td>a with href</td><td>link</td></tr>
    <tr><td>article</td><td>article</td></tr>
    <tr><td>button</td><td>button</td></tr>
    <tr><td>article</td><td>generic</td></tr>
    <tr><td>only one cell</td></tr>
    <tr><td></td><td>none</td></tr>
  </tbody>
</table>
<table>
  <caption>Attribute Mappings</caption>
  <tbody><tr><td>hidden</td><td>aria-hidden</td></tr></tbody>
</table>
</body></html>
"""

ACCNAME_HTML = """<!DOCTYPE html>
<html><head><title>Accessible Name and Description Computation 1.2</title></head>
<body>
<section id="abstract">
  <p>This document describes how user agents determine the names
     and descriptions of accessible objects.</p>
</section>
</body></html>
"""

DPUB_HTML = """<!DOCTYPE html>
<html><body>
<div class="role" id="doc-abstract"><p class="role-description">A short summary of the work.</p></div>
<div class="role" id="doc-example"><p class="role-description">An illustrative example.</p></div>
<div class="role"><p class="role-description">No identifier.</p></div>
</body></html>
"""

GRAPHICS_HTML = """<!DOCTYPE html>
<html><body>
<div class="role" id="graphics-document"><p class="role-description">A graphical document.</p></div>
<div class="role" id="graphics-symbol"><p class="role-description">A graphical object used to convey a simple meaning.</p></div>
</body></html>
"""


def write_sources(data_dir: Path, include=None) -> Path:
    """Write the fixture source tree; ``include`` limits which files exist"""
    files = {
        "primary": ("index.html", PRIMARY_HTML),
        "role_info": ("common/script/roleInfo.js", ROLE_INFO_JS),
        "html_aam": ("html-aam/index.html", HTML_AAM_HTML),
        "accname": ("accname/index.html", ACCNAME_HTML),
        "dpub": ("dpub-aria/index.html", DPUB_HTML),
        "graphics": ("graphics-aria/index.html", GRAPHICS_HTML),
    }
    aria_dir = data_dir / "aria"
    for key, (relative, content) in files.items():
        if include is not None and key not in include:
            continue
        path = aria_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return data_dir


def make_settings(data_dir: Path) -> PipelineSettings:
    return PipelineSettings(
        paths=PathSettings(data_dir=data_dir, output_file=data_dir / "aria-data.json")
    )


def soup_of(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def data_dir(tmp_path):
    """A complete fixture source tree."""
    return write_sources(tmp_path / "data")


@pytest.fixture
def settings(data_dir):
    return make_settings(data_dir)


@pytest.fixture
def primary_soup():
    return soup_of(PRIMARY_HTML)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Clear ARIA_KB_ overrides and undo any dictConfig done by a test."""
    for key in list(os.environ):
        if key.startswith("ARIA_KB_"):
            monkeypatch.delenv(key, raising=False)

    yield

    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True
    root.setLevel(logging.NOTSET)
