"""Styled components -- definitions, stylesheet, and capitalized tags.

Compiles the definitions in ``components/`` into render functions and a
stylesheet, then renders ``templates/page.html`` whose ``<Title>``,
``<Card>`` and ``<Badge>`` tags dispatch to those functions.

Run:
    python app.py
"""

import tempfile
from pathlib import Path

from jinja2 import FileSystemLoader

from stylekit import ComponentCompiler, check_templates, create_environment

here = Path(__file__).parent
stylesheet_path = Path(tempfile.mkdtemp()) / "css" / "components.css"

compiler = ComponentCompiler(here / "components", stylesheet_path)
registry = compiler.compile()

env = create_environment(registry, loader=FileSystemLoader(str(here / "templates")))
checked = check_templates(env)

output = env.get_template("page.html").render(
    title="Component Demo",
    features=[
        {"name": "Scoped classes", "status": "stable"},
        {"name": "Watch mode", "status": "beta"},
    ],
)
stylesheet = stylesheet_path.read_text()


def main() -> None:
    print(stylesheet)
    print(output)


if __name__ == "__main__":
    main()
