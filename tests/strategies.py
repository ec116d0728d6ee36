"""Shared hypothesis strategies for stylekit property-based testing.

- **Names**: component identifiers following the capitalized-tag convention
- **Styles**: multi-line CSS property text with stray surrounding whitespace
- **Markup**: properly nested component tag trees paired with the HTML they
  render to under the ``TREE_COMPONENTS`` definitions
"""

from __future__ import annotations

from hypothesis import strategies as st

component_names = st.from_regex(r"[A-Z][A-Za-z0-9_]{0,15}", fullmatch=True)

_style_line = st.from_regex(r"[a-z-]{1,12}: [a-z0-9#]{1,10};", fullmatch=True)

raw_styles = st.tuples(
    st.sampled_from(["", " ", "\n", "\n  "]),
    st.lists(_style_line, min_size=1, max_size=6),
    st.sampled_from(["", "\n", "  \n"]),
).map(lambda parts: parts[0] + "\n".join(parts[1]) + parts[2])

# Components available to generated trees: name -> tag
TREE_COMPONENTS = {"Title": "h1", "Card": "div", "Badge": "span"}

TREE_DEFINITIONS = {name.lower(): f"tag: {tag}\n" for name, tag in TREE_COMPONENTS.items()}

# Text without '<', '&' or Jinja delimiters, so it renders unchanged
_plain_text = st.text(alphabet="abcxyz 0123.,!", max_size=12)


def _element(children):
    def build(args):
        name, kids = args
        tag = TREE_COMPONENTS[name]
        source = "".join(kid[0] for kid in kids)
        expected = "".join(kid[1] for kid in kids)
        return (
            f"<{name}>{source}</{name}>",
            f'<{tag} class="psc-{name}">{expected}</{tag}>',
        )

    return st.tuples(
        st.sampled_from(sorted(TREE_COMPONENTS)),
        st.lists(children, max_size=3),
    ).map(build)


# (template source, expected rendered HTML)
nested_markup = st.recursive(
    _plain_text.map(lambda text: (text, text)),
    _element,
    max_leaves=12,
)
