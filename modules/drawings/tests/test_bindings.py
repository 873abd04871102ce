from __future__ import annotations

import pytest

from modules.drawings.bindings import render_values
from modules.drawings.models import DrawingRecord, TemplateRecord
from modules.drawings.validators import DrawingFormError, DrawingPayload, parse_drawing_form
from modules.overlay import load_layout

LAYOUT = load_layout(
    {
        "pageWidth": 842,
        "pageHeight": 595,
        "fields": [
            {"id": "f1", "label": "Job", "targetField": "job_number", "position": {"x": 0, "y": 0, "width": 50, "height": 10}},
            {"id": "f2", "label": "Qty", "targetFieldf": "quantity", "position": {"x": 0, "y": 20, "width": 50, "height": 10}},
            {"id": "edge_width", "label": "Edge", "position": {"x": 0, "y": 40, "width": 50, "height": 10}},
            {"id": "f4", "label": "Hole", "targetField": "hole_count", "position": {"x": 0, "y": 60, "width": 50, "height": 10}},
            {"id": "f5", "label": "Material", "targetField": "material", "position": {"x": 0, "y": 80, "width": 50, "height": 10}},
        ],
    }
)


def test_render_values_follows_target_fields():
    drawing = DrawingRecord(
        id="d1",
        job_number="J-100",
        quantity=4,
        additional_data={"edge_width": 250, "hole_count": 6},
    )
    values = render_values(LAYOUT, drawing)
    assert values == {"f1": "J-100", "f2": 4, "edge_width": 250, "f4": 6}


def test_overrides_win():
    drawing = DrawingRecord(job_number="J-100", material="AR400")
    values = render_values(LAYOUT, drawing, {"f5": "Hardox 500", "extra": "x"})
    assert values["f1"] == "J-100"
    assert values["f5"] == "Hardox 500"
    assert values["extra"] == "x"


def test_records_from_rows():
    drawing = DrawingRecord.from_row(
        {"id": 12, "template_id": 3, "customer": "Acme", "additional_data": None, "created_at": "2025-01-01"}
    )
    assert drawing.id == "12"
    assert drawing.template_id == "3"
    assert drawing.customer == "Acme"
    assert drawing.additional_data == {}

    template = TemplateRecord.from_row({"id": 3, "template_name": "Edge", "template_data": {"fields": []}})
    assert template.id == "3"
    assert template.template_data == {"fields": []}


def test_parse_drawing_form_normalises_inputs():
    form = parse_drawing_form(
        {
            "templateId": "t-1",
            "drawingId": "",
            "job_number": "J-7",
            "customer": "",
            "quantity": "12abc",
            "additional_data": '{"edge_width": 300}',
        }
    )
    assert form.template_id == "t-1"
    assert form.drawing_id is None
    assert form.customer is None
    assert form.quantity == 12
    assert form.additional_data == {"edge_width": 300}

    record = form.to_record()
    assert record.template_id == "t-1"
    assert record.job_number == "J-7"


@pytest.mark.parametrize("quantity", ["", None, "many"])
def test_bad_quantity_becomes_zero(quantity):
    assert parse_drawing_form({"templateId": "t", "quantity": quantity}).quantity == 0


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", ""])
def test_bad_additional_data_becomes_empty(raw):
    assert parse_drawing_form({"templateId": "t", "additional_data": raw}).additional_data == {}


@pytest.mark.parametrize("form", [{}, {"templateId": ""}, {"templateId": "   "}])
def test_template_is_required(form):
    with pytest.raises(DrawingFormError, match="Template is required"):
        parse_drawing_form(form)


def test_drawing_payload_does_not_need_a_template():
    payload = DrawingPayload.model_validate(
        {"id": 12, "drawing_number": "", "quantity": "abc", "additional_data": '{"edge_width": 300}'}
    )
    record = payload.to_record()
    assert record.id == "12"
    assert record.template_id is None
    assert record.drawing_number is None
    assert record.quantity == 0
    assert render_values(LAYOUT, record)["edge_width"] == 300
