#!/usr/bin/env python3
"""
Seed a library root with the sample sections.

Usage:
    python scripts/seed_sections.py [library_root]

If no library_root is provided, uses the first entry of LIBRARY_ROOTS.
Sections that already exist are left alone.
"""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, ".")

from backend import config
from backend.models.section import CreateSectionRequest
from backend.repos.section_repo import SectionRepo
from engine.kernel.errors import DuplicateSection

logger = logging.getLogger("seed_sections")


FAQ_TEMPLATE = """\
<div class="faq-1 page-width">
  <h2 class="faq-1__heading">{{ section.settings.heading }}</h2>
  {%- for block in section.blocks -%}
    <details class="faq-1__item" {{ block.shopify_attributes }}>
      <summary>{{ block.settings.question }}</summary>
      <div class="faq-1__answer">{{ block.settings.answer }}</div>
    </details>
  {%- endfor -%}
</div>

{% schema %}
{
  "name": "FAQ #1",
  "settings": [
    { "type": "text", "id": "heading", "label": "Heading", "default": "Frequently asked questions" }
  ],
  "blocks": [
    {
      "type": "question",
      "name": "Question",
      "settings": [
        { "type": "text", "id": "question", "label": "Question" },
        { "type": "richtext", "id": "answer", "label": "Answer" }
      ]
    }
  ],
  "presets": [{ "name": "FAQ #1" }]
}
{% endschema %}
"""

HERO_TEMPLATE = """\
<section class="hero-banner" style="background-image: url({{ section.settings.image | image_url: width: 1920 }});">
  <div class="hero-banner__overlay">
    <h1>{{ section.settings.heading }}</h1>
    <p>{{ section.settings.subheading }}</p>
    {%- if section.settings.button_label != blank -%}
      <a class="button" href="{{ section.settings.button_link }}">{{ section.settings.button_label }}</a>
    {%- endif -%}
  </div>
</section>

{% schema %}
{
  "name": "Hero Banner",
  "settings": [
    { "type": "image_picker", "id": "image", "label": "Background image" },
    { "type": "text", "id": "heading", "label": "Heading", "default": "Welcome" },
    { "type": "text", "id": "subheading", "label": "Subheading" },
    { "type": "text", "id": "button_label", "label": "Button label" },
    { "type": "url", "id": "button_link", "label": "Button link" }
  ],
  "presets": [{ "name": "Hero Banner" }]
}
{% endschema %}
"""

HERO_STYLE = """\
.hero-banner { background-size: cover; background-position: center; min-height: 60vh; display: flex; }
.hero-banner__overlay { margin: auto; text-align: center; color: #fff; padding: 2rem; background: rgba(0, 0, 0, 0.35); }
"""

TODO_TEMPLATE = """\
<div class="todo-list page-width" data-todo-list>
  <h2>{{ section.settings.heading }}</h2>
  <form data-todo-form>
    <input type="text" name="todo" placeholder="Add a task" required>
    <button type="submit">Add</button>
  </form>
  <ul data-todo-items></ul>
</div>

{% schema %}
{
  "name": "Todo List",
  "settings": [
    { "type": "text", "id": "heading", "label": "Heading", "default": "My tasks" }
  ],
  "presets": [{ "name": "Todo List" }]
}
{% endschema %}
"""

TODO_STYLE = """\
.todo-list ul { list-style: none; padding: 0; }
.todo-list li { display: flex; justify-content: space-between; padding: 0.5rem 0; border-bottom: 1px solid #eee; }
.todo-list li.is-done span { text-decoration: line-through; opacity: 0.6; }
"""

TODO_SCRIPT = """\
document.querySelectorAll('[data-todo-list]').forEach(function (root) {
  var form = root.querySelector('[data-todo-form]');
  var list = root.querySelector('[data-todo-items]');
  form.addEventListener('submit', function (event) {
    event.preventDefault();
    var input = form.elements.todo;
    var item = document.createElement('li');
    var label = document.createElement('span');
    label.textContent = input.value;
    label.addEventListener('click', function () { item.classList.toggle('is-done'); });
    var remove = document.createElement('button');
    remove.type = 'button';
    remove.textContent = 'Delete';
    remove.addEventListener('click', function () { item.remove(); });
    item.append(label, remove);
    list.appendChild(item);
    input.value = '';
  });
});
"""

SAMPLE_SECTIONS = [
    # Template only: installs report style, script and schema as skipped.
    CreateSectionRequest(
        id="faq-1",
        title="FAQ #1",
        description="Expandable FAQ section with accordion functionality.",
        categories=["faq", "free"],
        content=FAQ_TEMPLATE,
    ),
    CreateSectionRequest(
        id="hero-banner",
        title="Hero Banner",
        description="A full-width hero banner with text overlay and button.",
        categories=["hero", "free"],
        content=HERO_TEMPLATE,
        style=HERO_STYLE,
    ),
    CreateSectionRequest(
        id="todo-list",
        title="Todo List",
        description="A simple todo list component with add, edit, and delete functionality.",
        categories=["features", "free"],
        content=TODO_TEMPLATE,
        style=TODO_STYLE,
        script=TODO_SCRIPT,
        schema_fragment={
            "name": "todo-list",
            "settings": [
                {"type": "checkbox", "id": "todo_list_persist", "label": "Remember tasks between visits", "default": True}
            ],
        },
    ),
]


def seed(root: Path) -> list[str]:
    """Create each sample section under root. Returns the ids that were created."""
    repo = SectionRepo([root])
    created = []
    for req in SAMPLE_SECTIONS:
        try:
            repo.create(req)
        except DuplicateSection:
            logger.info("Skipping %s, already in %s", req.id, root)
            continue
        created.append(req.id)
    return created


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    root = Path(sys.argv[1]) if len(sys.argv) >= 2 else config.settings.LIBRARY_WRITE_ROOT
    created = seed(root)
    print(f"Seeded {len(created)} section(s) into {root}: {', '.join(created) or 'none'}")


if __name__ == "__main__":
    main()
