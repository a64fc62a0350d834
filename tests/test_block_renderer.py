import pytest

from app.schemas.block import parse_document, TextBlock
from app.services.block_renderer import (
    number_ordinal, gap_after, font_size_class, lightbox_source,
    render_block, render_sequence, render_document, GAP_TIGHT, GAP_WIDE,
)


def _blocks(*types):
    return parse_document([{"id": f"b{i}", "type": t, "content": f"item {i}"} for i, t in enumerate(types)])


# ========== TEST NUMÉROTATION ==========

def test_number_ordinal_restarts_after_other_block():
    """Test : [number, number, text, number] -> 1, 2, -, 1"""
    blocks = _blocks("number", "number", "text", "number")
    assert number_ordinal(blocks, 0) == 1
    assert number_ordinal(blocks, 1) == 2
    assert number_ordinal(blocks, 3) == 1

def test_number_ordinal_counts_consecutive_run():
    """Test : l'ordinal vaut 1 + la longueur de la suite de number juste avant"""
    blocks = _blocks("bullet", "number", "number", "number", "number")
    assert [number_ordinal(blocks, i) for i in range(1, 5)] == [1, 2, 3, 4]

def test_number_markers_in_html():
    """Test : les marqueurs rendus suivent la séquence"""
    blocks = _blocks("number", "number", "text", "number")
    html = render_sequence(blocks)
    assert html.count('<span class="number-marker">1.</span>') == 2
    assert html.count('<span class="number-marker">2.</span>') == 1

def test_number_ordinal_with_duplicate_ids():
    """Test : deux blocks au même id sont numérotés selon leur position"""
    blocks = parse_document([
        {"id": "x", "type": "number", "content": "un"},
        {"id": "x", "type": "number", "content": "deux"},
    ])
    html = render_sequence(blocks)
    assert '<span class="number-marker">1.</span>' in html
    assert '<span class="number-marker">2.</span>' in html

def test_numbering_inside_column_is_independent():
    """Test : une colonne numérote sa propre séquence"""
    blocks = parse_document([
        {"id": "n1", "type": "number", "content": "a"},
        {"id": "n2", "type": "number", "content": "b"},
        {"id": "c", "type": "columns", "columns": [
            {"id": "col", "blocks": [{"id": "n3", "type": "number", "content": "c"}]},
        ]},
    ])
    column_html = render_block(blocks[2], blocks)
    assert '<span class="number-marker">1.</span>' in column_html


# ========== TEST ESPACEMENT ==========

def test_gap_tight_between_list_blocks():
    """Test : deux blocks de liste adjacents ont un petit espacement"""
    blocks = _blocks("bullet", "todo", "number", "text")
    assert gap_after(blocks, 0) == GAP_TIGHT
    assert gap_after(blocks, 1) == GAP_TIGHT
    assert gap_after(blocks, 2) == GAP_WIDE
    assert gap_after(blocks, 3) == GAP_WIDE

def test_gap_wide_between_text_blocks():
    blocks = _blocks("text", "text")
    assert gap_after(blocks, 0) == GAP_WIDE


# ========== TEST TAILLES ==========

def test_font_size_defaults():
    """Test : taille par défaut selon le type"""
    h1, h2, h3, quote, text = _blocks("h1", "h2", "h3", "quote", "text")
    assert font_size_class(h1) == "text-5xl"
    assert font_size_class(h2) == "text-4xl"
    assert font_size_class(h3) == "text-3xl"
    assert font_size_class(quote) == "text-xl"
    assert font_size_class(text) == "text-base"

def test_font_size_override():
    block = TextBlock(id="x", type="h1", content="Titre", fontSize="sm")
    assert font_size_class(block) == "text-sm"
    assert "text-sm" in render_block(block)


# ========== TEST RENDU ==========

def test_render_is_idempotent():
    """Test : rendre deux fois la même séquence donne le même HTML"""
    blocks = parse_document([
        {"id": "a", "type": "h1", "content": "Titre"},
        {"id": "b", "type": "todo", "content": "Faire", "checked": True},
        {"id": "c", "type": "table", "tableData": [["x", "y"], ["1", "2"]]},
        {"id": "d", "type": "divider"},
    ])
    assert render_document(blocks) == render_document(blocks)

def test_render_escapes_content():
    """Test : le contenu utilisateur est échappé"""
    block = TextBlock(id="x", type="text", content="<script>alert(1)</script>")
    html = render_block(block)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html

def test_render_todo_checked_state():
    blocks = parse_document([{"id": "t", "type": "todo", "content": "Fini", "checked": True}])
    html = render_block(blocks[0], blocks)
    assert "is-checked" in html
    assert 'data-checked="true"' in html

def test_render_table_cells():
    blocks = parse_document([{"id": "t", "type": "table", "tableData": [["a", "b"], ["c", "d"]]}])
    html = render_block(blocks[0])
    assert html.count("<tr>") == 2
    assert "<td>d</td>" in html

def test_render_document_wraps_blocks():
    blocks = _blocks("text", "bullet")
    html = render_document(blocks)
    assert html.startswith('<article class="page-content">')
    assert 'data-block-id="b0"' in html
    assert 'data-block-id="b1"' in html


# ========== TEST LIGHTBOX ==========

@pytest.mark.parametrize("activation, expected", [
    ("double", "https://example.com/a.png"),
    ("single", None),
])
def test_lightbox_on_double_activation(activation, expected):
    """Test : seule la double activation ouvre l'image en plein écran"""
    blocks = parse_document([{"id": "i", "type": "image", "content": "https://example.com/a.png"}])
    assert lightbox_source(blocks[0], activation) == expected

def test_lightbox_ignores_other_blocks():
    blocks = _blocks("text")
    assert lightbox_source(blocks[0], "double") is None

def test_image_render_carries_lightbox_source():
    """Test : l'image rendue porte la source plein écran, pas une image sans URL"""
    blocks = parse_document([
        {"id": "i", "type": "image", "content": "https://example.com/a.png"},
        {"id": "j", "type": "image", "content": ""},
    ])
    assert 'data-lightbox-src="https://example.com/a.png"' in render_block(blocks[0])
    assert "data-lightbox" not in render_block(blocks[1])
