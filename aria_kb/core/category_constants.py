#!/usr/bin/env python3
"""
Static role classification lists used by the role categorizer.

These are immutable module constants; the categorizer checks them in a
fixed order and the first list containing a role name decides its category.
"""

ABSTRACT_ROLE_NAMES = frozenset({
    "roletype", "structure", "widget", "window", "input", "range", "command",
    "composite", "section", "sectionhead", "select", "landmark",
})

WIDGET_ROLE_NAMES = frozenset({
    "button", "checkbox", "gridcell", "link", "menuitem", "menuitemcheckbox",
    "menuitemradio", "option", "progressbar", "radio", "scrollbar", "searchbox",
    "separator", "slider", "spinbutton", "switch", "tab", "tabpanel", "textbox",
    "treeitem",
})

COMPOSITE_ROLE_NAMES = frozenset({
    "combobox", "grid", "listbox", "menu", "menubar", "radiogroup", "tablist",
    "tree", "treegrid",
})

# Document structure roles. Categorization reaches these through the
# document fallback, so none of them may appear on another list.
DOCUMENT_ROLE_NAMES = frozenset({
    "application", "article", "blockquote", "caption", "cell", "code",
    "columnheader", "definition", "deletion", "directory", "document", "emphasis",
    "feed", "figure", "generic", "group", "heading", "img", "insertion", "list",
    "listitem", "math", "meter", "none", "note", "paragraph", "presentation",
    "row", "rowgroup", "rowheader", "strong", "subscript", "superscript",
    "table", "term", "time", "toolbar", "tooltip",
})

LANDMARK_ROLE_NAMES = frozenset({
    "banner", "complementary", "contentinfo", "form", "main", "navigation",
    "region", "search",
})

LIVE_REGION_ROLE_NAMES = frozenset({"alert", "log", "marquee", "status", "timer"})

WINDOW_ROLE_NAMES = frozenset({"alertdialog", "dialog"})
