"""Built-in pattern manifests.

Declarative fixture data for the six patterns every registry can load:
Tabs, Dialog, Accordion, Form, Card and Navigation. Each factory returns a
fresh manifest so callers can register them into independent registries.

Emission templates use Mustache-like placeholders and are carried as
opaque strings; nothing in the engine renders them.
"""

from canvas_patterns.canvas import (
    Artboard,
    CanvasDocument,
    FrameNode,
    Rect,
    TextNode,
)
from canvas_patterns.manifest import (
    AccessibilityRule,
    NodePosition,
    Offset,
    PatternCategory,
    PatternEmission,
    PatternEmissionRule,
    PatternExample,
    PatternLayer,
    PatternManifest,
    PatternNodeDefinition,
    PatternRelationship,
    PatternValidationRule,
)

TABS_HTML = """\
<div class="tabs">
  <div role="tablist" class="tab-list">
    {{#tablist.children}}
    <button role="tab" aria-selected="{{selected}}" id="tab-{{id}}" aria-controls="panel-{{id}}">
      {{text}}
    </button>
    {{/tablist.children}}
  </div>
  {{#tabpanel}}
  <div role="tabpanel" id="panel-{{id}}" aria-labelledby="tab-{{id}}" class="{{#if hidden}}hidden{{/if}}">
    {{children}}
  </div>
  {{/tabpanel}}
</div>
"""

DIALOG_HTML = """\
<button id="trigger-{{trigger.id}}" aria-controls="dialog-{{dialog.id}}">
  {{trigger.text}}
</button>
<div id="dialog-{{dialog.id}}" role="dialog" aria-modal="true" aria-labelledby="title-{{title.id}}" class="{{#if hidden}}hidden{{/if}}">
  <div class="dialog-overlay"></div>
  <div class="dialog-content">
    <h1 id="title-{{title.id}}">{{title.text}}</h1>
    {{content.children}}
    {{#if close}}
    <button id="close-{{close.id}}" aria-controls="dialog-{{dialog.id}}">Close</button>
    {{/if}}
  </div>
</div>
"""

ACCORDION_HTML = """\
<div class="accordion">
  {{#accordion.children}}
  <div class="accordion-item">
    <button class="accordion-trigger" aria-expanded="{{expanded}}" aria-controls="panel-{{id}}">
      {{trigger.text}}
    </button>
    <div id="panel-{{id}}" class="accordion-panel" aria-labelledby="trigger-{{id}}" {{#unless expanded}}hidden{{/unless}}>
      {{panel.children}}
    </div>
  </div>
  {{/accordion.children}}
</div>
"""

FORM_HTML = """\
<form class="form">
  {{#form.children}}
  {{#if field}}
  <div class="form-field">
    {{#if label}}
    <label for="input-{{input.id}}">{{label.text}}</label>
    {{/if}}
    <input id="input-{{input.id}}" name="{{input.name}}" type="{{input.type}}" {{#if required}}required{{/if}} />
  </div>
  {{/if}}
  {{/form.children}}
  <button type="submit" class="form-submit">{{submit.text}}</button>
</form>
"""

CARD_HTML = """\
<article class="card">
  {{#if header}}
  <header class="card-header">{{header.children}}</header>
  {{/if}}
  {{#if body}}
  <div class="card-body">{{body.children}}</div>
  {{/if}}
  {{#if footer}}
  <footer class="card-footer">{{footer.children}}</footer>
  {{/if}}
</article>
"""

NAVIGATION_HTML = """\
<nav class="navigation">
  {{#if logo}}
  <div class="nav-logo">{{logo.children}}</div>
  {{/if}}
  <ul class="nav-links">
    {{#nav.children}}
    {{#if link}}
    <li><a href="{{link.href}}" class="nav-link">{{link.text}}</a></li>
    {{/if}}
    {{/nav.children}}
  </ul>
</nav>
"""


def tabs_example_document() -> CanvasDocument:
    """Two tabs with two panels, realizing the Tabs pattern."""
    return CanvasDocument(
        id="01JF2PZV9G2WR5C3W7P0YHNX9D",
        name="Simple Tabs",
        artboards=[
            Artboard(
                id="01JF2Q02Q3MZ3Q9J7HB3X6N9QB",
                name="Desktop",
                frame=Rect(x=0, y=0, width=800, height=600),
                children=[
                    FrameNode(
                        id="01JF2Q06GTS16EJ3A3F0KK9K3T",
                        name="Tabs Container",
                        frame=Rect(x=32, y=32, width=736, height=536),
                        semantic_key="tabs.container",
                        children=[
                            FrameNode(
                                id="01JF2Q07GTS16EJ3A3F0KK9K3U",
                                name="Tab List",
                                frame=Rect(x=0, y=0, width=736, height=48),
                                semantic_key="tabs.tablist",
                                children=[
                                    TextNode(
                                        id="01JF2Q08GTS16EJ3A3F0KK9K3V",
                                        name="Tab 1",
                                        frame=Rect(x=16, y=12, width=80, height=24),
                                        text="Overview",
                                        semantic_key="tabs.tab[0]",
                                    ),
                                    TextNode(
                                        id="01JF2Q08GTS16EJ3A3F0KK9K3W",
                                        name="Tab 2",
                                        frame=Rect(x=112, y=12, width=80, height=24),
                                        text="Details",
                                        semantic_key="tabs.tab[1]",
                                    ),
                                ],
                            ),
                            FrameNode(
                                id="01JF2Q09GTS16EJ3A3F0KK9K3W",
                                name="Tab Panel 1",
                                frame=Rect(x=0, y=48, width=736, height=488),
                                semantic_key="tabs.tabpanel[0]",
                                children=[
                                    TextNode(
                                        id="01JF2Q10GTS16EJ3A3F0KK9K3X",
                                        name="Overview Content",
                                        frame=Rect(x=16, y=16, width=200, height=32),
                                        text="This is the overview panel.",
                                        semantic_key="tabs.content[0]",
                                    )
                                ],
                            ),
                            FrameNode(
                                id="01JF2Q09GTS16EJ3A3F0KK9K3Y",
                                name="Tab Panel 2",
                                frame=Rect(x=0, y=48, width=736, height=488),
                                semantic_key="tabs.tabpanel[1]",
                                visible=False,
                                children=[
                                    TextNode(
                                        id="01JF2Q10GTS16EJ3A3F0KK9K3Z",
                                        name="Details Content",
                                        frame=Rect(x=16, y=16, width=200, height=32),
                                        text="This is the details panel.",
                                        semantic_key="tabs.content[1]",
                                    )
                                ],
                            ),
                        ],
                    )
                ],
            )
        ],
    )


def tabs_pattern() -> PatternManifest:
    return PatternManifest(
        id="pattern.tabs",
        name="Tabs",
        description="Tab navigation pattern with panels",
        category=PatternCategory.NAVIGATION,
        layer=PatternLayer.COMPOSERS,
        tags=frozenset({"tabs", "navigation", "panels", "accessibility"}),
        structure=[
            PatternNodeDefinition(
                id="tablist",
                name="Tab List",
                type="frame",
                semantic_key="tabs.tablist",
                required=True,
                properties={"role": "tablist"},
            ),
            PatternNodeDefinition(
                id="tab",
                name="Tab",
                type="frame",
                semantic_key="tabs.tab",
                required=True,
                multiple=True,
                properties={"role": "tab"},
                position=NodePosition(relative_to="tablist"),
            ),
            PatternNodeDefinition(
                id="tabpanel",
                name="Tab Panel",
                type="frame",
                semantic_key="tabs.tabpanel",
                required=True,
                multiple=True,
                properties={"role": "tabpanel"},
            ),
        ],
        relationships=[
            PatternRelationship(
                from_id="tab",
                to_id="tabpanel",
                type="controls",
                required=True,
                description="Tab controls corresponding panel",
            ),
            PatternRelationship(
                from_id="tablist",
                to_id="tab",
                type="owns",
                required=True,
                description="Tab list owns individual tabs",
            ),
        ],
        emission=PatternEmission(
            html=PatternEmissionRule(target="html", template=TABS_HTML),
            react=PatternEmissionRule(
                target="react",
                component="Tabs",
                props={"defaultValue": "{{firstTabId}}", "orientation": "horizontal"},
            ),
            accessibility=[
                AccessibilityRule(node_id="tablist", rule="role", value="tablist", required=True),
                AccessibilityRule(node_id="tab", rule="role", value="tab", required=True),
                AccessibilityRule(
                    node_id="tab", rule="aria-controls", value="tabpanel", required=True
                ),
                AccessibilityRule(
                    node_id="tabpanel", rule="aria-labelledby", value="tab", required=True
                ),
            ],
        ),
        validation=[
            PatternValidationRule(
                type="required-child",
                message="Tab list must contain at least one tab",
                node_id="tablist",
                condition="children.length >= 1",
            ),
            PatternValidationRule(
                type="relationship",
                message="Each tab must control a corresponding panel",
                condition="tab.length === tabpanel.length",
            ),
        ],
        examples=[
            PatternExample(
                name="Simple Tabs",
                description="Basic tabs with two panels",
                canvas_document=tabs_example_document(),
            )
        ],
    )


def dialog_pattern() -> PatternManifest:
    return PatternManifest(
        id="pattern.dialog",
        name="Dialog",
        description="Modal dialog pattern with backdrop and focus management",
        category=PatternCategory.CONTAINERS,
        layer=PatternLayer.COMPOSERS,
        tags=frozenset({"dialog", "modal", "overlay", "accessibility"}),
        structure=[
            PatternNodeDefinition(
                id="trigger",
                name="Trigger Button",
                type="frame",
                semantic_key="dialog.trigger",
                required=True,
                properties={"role": "button"},
            ),
            PatternNodeDefinition(
                id="dialog",
                name="Dialog Container",
                type="frame",
                semantic_key="dialog.container",
                required=True,
                properties={"role": "dialog", "aria-modal": True},
            ),
            PatternNodeDefinition(
                id="title",
                name="Dialog Title",
                type="text",
                semantic_key="dialog.title",
                required=True,
                position=NodePosition(relative_to="dialog", offset=Offset(x=24, y=24)),
            ),
            PatternNodeDefinition(
                id="content",
                name="Dialog Content",
                type="frame",
                semantic_key="dialog.content",
                required=True,
                position=NodePosition(relative_to="dialog", offset=Offset(x=24, y=64)),
            ),
            PatternNodeDefinition(
                id="close",
                name="Close Button",
                type="frame",
                semantic_key="dialog.close",
                required=False,
                position=NodePosition(
                    relative_to="dialog", alignment="end", offset=Offset(x=-24, y=24)
                ),
            ),
        ],
        relationships=[
            PatternRelationship(
                from_id="trigger",
                to_id="dialog",
                type="controls",
                required=True,
                description="Trigger button controls dialog visibility",
            ),
            PatternRelationship(
                from_id="dialog",
                to_id="title",
                type="labelledby",
                required=True,
                description="Dialog is labelled by title",
            ),
            PatternRelationship(
                from_id="close",
                to_id="dialog",
                type="controls",
                required=False,
                description="Close button controls dialog visibility",
            ),
        ],
        emission=PatternEmission(
            html=PatternEmissionRule(target="html", template=DIALOG_HTML),
            accessibility=[
                AccessibilityRule(node_id="dialog", rule="role", value="dialog", required=True),
                AccessibilityRule(
                    node_id="dialog", rule="aria-labelledby", value="title", required=True
                ),
                AccessibilityRule(
                    node_id="trigger", rule="aria-controls", value="dialog", required=True
                ),
                AccessibilityRule(
                    node_id="close", rule="aria-label", value="Close", required=False
                ),
            ],
        ),
        validation=[
            PatternValidationRule(
                type="required-child",
                message="Dialog must have a title",
                node_id="title",
            ),
            PatternValidationRule(
                type="relationship",
                message="Dialog must be controlled by trigger button",
                condition="trigger !== null",
            ),
        ],
    )


def accordion_pattern() -> PatternManifest:
    return PatternManifest(
        id="pattern.accordion",
        name="Accordion",
        description="Collapsible content sections",
        category=PatternCategory.CONTAINERS,
        layer=PatternLayer.COMPOUNDS,
        tags=frozenset({"accordion", "collapsible", "disclosure"}),
        structure=[
            PatternNodeDefinition(
                id="accordion",
                name="Accordion Container",
                type="frame",
                semantic_key="accordion.container",
                required=True,
            ),
            PatternNodeDefinition(
                id="item",
                name="Accordion Item",
                type="frame",
                semantic_key="accordion.item",
                required=True,
                multiple=True,
            ),
            PatternNodeDefinition(
                id="trigger",
                name="Item Trigger",
                type="frame",
                semantic_key="accordion.trigger",
                required=True,
                multiple=True,
            ),
            PatternNodeDefinition(
                id="panel",
                name="Item Panel",
                type="frame",
                semantic_key="accordion.panel",
                required=True,
                multiple=True,
            ),
        ],
        relationships=[
            PatternRelationship(
                from_id="trigger",
                to_id="panel",
                type="controls",
                required=True,
                description="Trigger controls panel visibility",
            ),
        ],
        emission=PatternEmission(
            html=PatternEmissionRule(target="html", template=ACCORDION_HTML),
            accessibility=[
                AccessibilityRule(
                    node_id="trigger", rule="aria-controls", value="panel", required=True
                ),
            ],
        ),
        validation=[
            PatternValidationRule(
                type="structure",
                message="Each accordion item must have trigger and panel",
                condition="item.length === trigger.length && trigger.length === panel.length",
            ),
        ],
    )


def form_pattern() -> PatternManifest:
    return PatternManifest(
        id="pattern.form",
        name="Form",
        description="Form with fields, labels, and validation",
        category=PatternCategory.FORMS,
        layer=PatternLayer.COMPOSERS,
        tags=frozenset({"form", "input", "validation"}),
        structure=[
            PatternNodeDefinition(
                id="form",
                name="Form Container",
                type="frame",
                semantic_key="form.container",
                required=True,
            ),
            PatternNodeDefinition(
                id="field",
                name="Form Field",
                type="frame",
                semantic_key="form.field",
                required=True,
                multiple=True,
            ),
            PatternNodeDefinition(
                id="label",
                name="Field Label",
                type="text",
                semantic_key="form.label",
                required=True,
                multiple=True,
            ),
            PatternNodeDefinition(
                id="input",
                name="Input Field",
                type="component",
                semantic_key="form.input",
                required=True,
                multiple=True,
                properties={"componentKey": "TextField"},
            ),
            PatternNodeDefinition(
                id="submit",
                name="Submit Button",
                type="frame",
                semantic_key="form.submit",
                required=True,
            ),
        ],
        relationships=[
            PatternRelationship(
                from_id="label",
                to_id="input",
                type="labelledby",
                required=True,
                description="Label describes input field",
            ),
            PatternRelationship(
                from_id="form",
                to_id="submit",
                type="owns",
                required=True,
                description="Form owns submit button",
            ),
        ],
        emission=PatternEmission(
            html=PatternEmissionRule(target="html", template=FORM_HTML),
        ),
        validation=[
            PatternValidationRule(
                type="relationship",
                message="Each input must have a corresponding label",
                condition="label.length === input.length",
            ),
        ],
    )


def card_pattern() -> PatternManifest:
    return PatternManifest(
        id="pattern.card",
        name="Card",
        description="Content card with optional header, body, and footer",
        category=PatternCategory.DISPLAY,
        layer=PatternLayer.COMPOUNDS,
        tags=frozenset({"card", "container", "layout"}),
        structure=[
            PatternNodeDefinition(
                id="card",
                name="Card Container",
                type="frame",
                semantic_key="card.container",
                required=True,
            ),
            PatternNodeDefinition(
                id="header",
                name="Card Header",
                type="frame",
                semantic_key="card.header",
                required=False,
                position=NodePosition(relative_to="card", offset=Offset(x=0, y=0)),
            ),
            PatternNodeDefinition(
                id="body",
                name="Card Body",
                type="frame",
                semantic_key="card.body",
                required=False,
                position=NodePosition(relative_to="card", offset=Offset(x=0, y=80)),
            ),
            PatternNodeDefinition(
                id="footer",
                name="Card Footer",
                type="frame",
                semantic_key="card.footer",
                required=False,
                position=NodePosition(relative_to="card", alignment="end"),
            ),
        ],
        emission=PatternEmission(
            html=PatternEmissionRule(target="html", template=CARD_HTML),
        ),
    )


def navigation_pattern() -> PatternManifest:
    return PatternManifest(
        id="pattern.navigation",
        name="Navigation",
        description="Navigation menu with links",
        category=PatternCategory.NAVIGATION,
        layer=PatternLayer.COMPOUNDS,
        tags=frozenset({"navigation", "menu", "links"}),
        structure=[
            PatternNodeDefinition(
                id="nav",
                name="Navigation Container",
                type="frame",
                semantic_key="nav.container",
                required=True,
            ),
            PatternNodeDefinition(
                id="link",
                name="Navigation Link",
                type="frame",
                semantic_key="nav.link",
                required=True,
                multiple=True,
            ),
            PatternNodeDefinition(
                id="logo",
                name="Logo/Brand",
                type="frame",
                semantic_key="nav.logo",
                required=False,
                position=NodePosition(relative_to="nav", alignment="start"),
            ),
        ],
        emission=PatternEmission(
            html=PatternEmissionRule(target="html", template=NAVIGATION_HTML),
        ),
        validation=[
            PatternValidationRule(
                type="required-child",
                message="Navigation must contain at least one link",
                node_id="link",
                condition="children.filter(c => c.type === 'link').length >= 1",
            ),
        ],
    )


BUILTIN_PATTERN_FACTORIES = (
    tabs_pattern,
    dialog_pattern,
    accordion_pattern,
    form_pattern,
    card_pattern,
    navigation_pattern,
)


def builtin_patterns() -> list[PatternManifest]:
    """Fresh instances of every built-in manifest."""
    return [factory() for factory in BUILTIN_PATTERN_FACTORIES]


__all__ = [
    "BUILTIN_PATTERN_FACTORIES",
    "builtin_patterns",
    "tabs_pattern",
    "dialog_pattern",
    "accordion_pattern",
    "form_pattern",
    "card_pattern",
    "navigation_pattern",
    "tabs_example_document",
]
