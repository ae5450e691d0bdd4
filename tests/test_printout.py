from datetime import date

import pytest

from surround.estimate import SUMMARY, assemble_line_items, estimate_total, project_view
from surround.printout import DASH, Party, format_money, job_summary, render_estimate_html, wall_summary
from surround.takeoff import Configuration, build_model


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, "$0.00"),
        (1234.5, "$1,234.50"),
        (313.78, "$313.78"),
        (-1, "-$1.00"),
        (float("nan"), "$0.00"),
        (float("inf"), "$0.00"),
        (None, "$0.00"),
        ("junk", "$0.00"),
    ],
)
def test_format_money(value, expected):
    assert format_money(value) == expected


def test_wall_summary():
    assert wall_summary(Configuration()) == '32" / 60" / 32" @ 96"'
    assert wall_summary(Configuration(wall1=30.5)) == '30.5" / 60" / 32" @ 96"'


def test_job_summary_uses_catalog_labels():
    job = job_summary(Configuration(waterproofing="liquid"), notes="Scope", estimate_number="E-7")
    assert job.material == "PVC Panels"
    assert job.backer == "Cement board"
    assert job.waterproofing == "Liquid membrane (roll/brush)"
    assert job.estimate_number == "E-7"


def test_contact_line():
    assert Party(phone="555", email="a@b.c").contact_line == "555 • a@b.c"
    assert Party(email="a@b.c").contact_line == "a@b.c"
    assert Party().contact_line == ""


def _render(customer=None, config=None, **kwargs):
    config = config or Configuration()
    items = assemble_line_items(build_model(config), config)
    return render_estimate_html(
        company=Party(name="Acme Baths", phone="555-0100"),
        customer=customer or Party(name="Kevin"),
        job=job_summary(config, notes="Install new surround."),
        rows=project_view(items, SUMMARY),
        total=estimate_total(items),
        today=date(2026, 3, 4),
        **kwargs,
    )


def test_printout_contains_rows_and_master_total():
    html = _render()
    assert "Acme Baths | Shower Estimate" in html
    assert "03/04/2026" in html
    assert "Wall panels (96 x 48 in)" in html
    assert "Cement board (sheets)" in html
    # Summary rows only, master total
    assert "Panel adhesive" not in html
    assert "$313.78" in html
    assert "$50.94" in html


def test_quantity_only_row_prints_dashes():
    html = _render()
    row = html.split("Wall panels (96 x 48 in)")[1].split("</tr>")[0]
    assert row.count(DASH) == 2


def test_printout_escapes_user_text():
    html = _render(customer=Party(name="<script>x</script>"))
    assert "<script>x</script>" not in html
    assert "&lt;script&gt;" in html


def test_blank_estimate_number_and_logo():
    html = _render()
    assert f"<b>Estimate #:</b> {DASH}" in html
    assert "<img" not in html
    assert 'src="https://example.com/logo.png"' in _render(logo_url="https://example.com/logo.png")
