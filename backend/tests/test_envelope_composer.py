"""
Envelope composer unit tests.

Covers preview size resolution, single and batch composition, and the
advisory progress callback.
"""

from unittest.mock import Mock

import pytest

from envelope_printer.models.address import AddressRecord
from envelope_printer.models.envelope import ContentBox, EnvelopeSize, LayoutParameters

RETURN_BLOCK = "Acme Corp<br>1 Sender Way<br>Chicago, IL 60601"


def _records():
    return [
        AddressRecord(name="Jane Doe", address1="123 Main St", city="Springfield", state="IL", zip="62704"),
        AddressRecord(name="Jean Roy", city="Montreal", country="Canada"),
        AddressRecord(name="Ann Lee", address1="9 Elm Rd"),
    ]


# ---------------------------------------------------------------------------
# resolve_content_box
# ---------------------------------------------------------------------------

class TestResolveContentBox:

    @pytest.mark.parametrize("size,expected", [
        (EnvelopeSize.STANDARD, (456, 228)),
        (EnvelopeSize.A4, (600, 400)),
        (EnvelopeSize.LEGAL, (650, 450)),
    ])
    def test_fixed_sizes(self, size, expected):
        from envelope_printer.services.envelope_composer import resolve_content_box

        box = resolve_content_box(LayoutParameters(envelope_size=size))
        assert (box.width, box.height) == expected

    def test_custom_size_is_scaled(self):
        from envelope_printer.services.envelope_composer import resolve_content_box

        box = resolve_content_box(LayoutParameters(envelope_size="custom", custom_width=9.5, custom_height=4.125))
        assert box.width == pytest.approx(475)
        assert box.height == pytest.approx(123.75)

    def test_custom_size_is_clamped(self):
        from envelope_printer.services.envelope_composer import resolve_content_box

        box = resolve_content_box(LayoutParameters(envelope_size="custom", custom_width=20, custom_height=20))
        assert (box.width, box.height) == (800, 500)

    def test_custom_without_both_dimensions_keeps_previous(self):
        from envelope_printer.services.envelope_composer import resolve_content_box

        previous = ContentBox(width=600, height=400)
        layout = LayoutParameters(envelope_size="custom", custom_width=9.5)

        assert resolve_content_box(layout, previous) is previous
        assert resolve_content_box(layout) is None

    def test_zero_dimension_counts_as_missing(self):
        from envelope_printer.services.envelope_composer import resolve_content_box

        previous = ContentBox(width=456, height=228)
        layout = LayoutParameters(envelope_size="custom", custom_width=0, custom_height=4)
        assert resolve_content_box(layout, previous) is previous


# ---------------------------------------------------------------------------
# compose_one
# ---------------------------------------------------------------------------

class TestComposeOne:

    def test_document_carries_blocks_and_layout(self):
        from envelope_printer.services.envelope_composer import compose_one

        layout = LayoutParameters(font_size=12, font_family="Georgia")
        doc = compose_one(RETURN_BLOCK, ["Jane Doe", "123 Main St"], layout)

        assert doc.return_block == RETURN_BLOCK
        assert doc.recipient_lines == ["Jane Doe", "123 Main St"]
        assert doc.recipient_html == "Jane Doe<br>123 Main St"
        assert doc.recipient_text == "Jane Doe\n123 Main St"
        assert doc.font_family == "Georgia"
        assert doc.font_size == 12
        assert (doc.content_box.width, doc.content_box.height) == (456, 228)

    def test_positions_for_print(self):
        from envelope_printer.services.envelope_composer import compose_one

        doc = compose_one(RETURN_BLOCK, ["Jane Doe"], LayoutParameters())

        assert doc.return_position.top == 0.5
        assert doc.return_position.left == 0.5
        assert doc.recipient_position.bottom == 2.0
        assert doc.recipient_position.right == 1.0

    def test_fragment_embeds_return_block_verbatim(self):
        from envelope_printer.services.envelope_composer import compose_one

        doc = compose_one(RETURN_BLOCK, ["O'Neil & Co"], LayoutParameters())

        assert doc.html.startswith('<div class="envelope">')
        assert f'<div class="return-address">{RETURN_BLOCK}</div>' in doc.html
        assert '<div class="recipient-address">O&#x27;Neil &amp; Co</div>' in doc.html

    def test_custom_without_dimensions_uses_previous_box(self):
        from envelope_printer.services.envelope_composer import compose_one

        previous = ContentBox(width=650, height=450)
        doc = compose_one(RETURN_BLOCK, ["Jane Doe"], LayoutParameters(envelope_size="custom"), previous_box=previous)

        assert doc.content_box == previous


# ---------------------------------------------------------------------------
# compose_all
# ---------------------------------------------------------------------------

class TestComposeAll:

    def test_one_document_per_record_in_order(self):
        from envelope_printer.services.envelope_composer import compose_all

        records = _records()
        docs = compose_all(RETURN_BLOCK, records, LayoutParameters())

        assert len(docs) == len(records)
        assert [d.recipient_lines[0] for d in docs] == ["Jane Doe", "Jean Roy", "Ann Lee"]
        assert docs[0].recipient_lines == ["Jane Doe", "123 Main St", "Springfield, IL, 62704"]
        assert docs[1].recipient_lines == ["Jean Roy", "Montreal", "Canada"]

    def test_every_document_shares_return_block_and_layout(self):
        from envelope_printer.services.envelope_composer import compose_all

        layout = LayoutParameters(envelope_size="legal", font_size=16, font_family="Courier")
        docs = compose_all(RETURN_BLOCK, _records(), layout)

        assert {d.return_block for d in docs} == {RETURN_BLOCK}
        assert {d.font_family for d in docs} == {"Courier"}
        assert {(d.content_box.width, d.content_box.height) for d in docs} == {(650, 450)}

    def test_empty_list_gives_no_documents(self):
        from envelope_printer.services.envelope_composer import compose_all

        assert compose_all(RETURN_BLOCK, [], LayoutParameters()) == []

    def test_progress_reported_after_each_record(self):
        from envelope_printer.services.envelope_composer import compose_all

        progress = Mock()
        compose_all(RETURN_BLOCK, _records(), LayoutParameters(), on_progress=progress)

        assert [c.args for c in progress.call_args_list] == [(1, 3), (2, 3), (3, 3)]

    def test_failing_progress_callback_does_not_change_result(self):
        from envelope_printer.services.envelope_composer import compose_all

        progress = Mock(side_effect=RuntimeError("progress bar gone"))
        docs = compose_all(RETURN_BLOCK, _records(), LayoutParameters(), on_progress=progress)

        assert len(docs) == 3
        assert progress.call_count == 3
