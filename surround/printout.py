"""Printable customer estimate.

The printout only formats what it is handed: the projected rows and the
master total. It never recomputes quantities or prices.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from jinja2 import Environment

from surround.estimate import LineItem
from surround.rules import RULES, RuleTables
from surround.takeoff import Configuration

DASH = "—"

FOOTER = (
    "This estimate is based on provided measurements and standard estimating assumptions. "
    "Field conditions may require adjustments. Taxes, permits, demolition, plumbing, electrical, "
    "and unforeseen repairs are not included unless specifically noted."
)


@dataclass(frozen=True)
class Party:
    name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""

    @property
    def contact_line(self) -> str:
        return " • ".join(x for x in (self.phone, self.email) if x)


@dataclass(frozen=True)
class JobSummary:
    material: str
    backer: str
    waterproofing: str
    walls: str
    notes: str = ""
    estimate_number: str = ""


# ----------------------------
# Formatting
# ----------------------------
def format_money(value) -> str:
    try:
        x = float(value)
    except (TypeError, ValueError):
        x = 0.0
    if not math.isfinite(x):
        x = 0.0
    sign = "-" if x < 0 and round(abs(x), 2) > 0 else ""
    return f"{sign}${abs(x):,.2f}"


def _inches(v: float) -> str:
    return f'{v:g}"'


def wall_summary(config: Configuration) -> str:
    walls = " / ".join(_inches(w) for w in config.walls)
    return f"{walls} @ {_inches(config.height)}"


def job_summary(
    config: Configuration,
    notes: str = "",
    estimate_number: str = "",
    rules: RuleTables = RULES,
) -> JobSummary:
    return JobSummary(
        material=rules.material(config.material).label,
        backer=rules.backer(config.backer).label,
        waterproofing=rules.waterproofing(config.waterproofing).label,
        walls=wall_summary(config),
        notes=notes,
        estimate_number=estimate_number,
    )


# ----------------------------
# HTML
# ----------------------------
TEMPLATE = """<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>Estimate</title>
  <style>
    :root{ --navy:#0b2a4a; --red:#c1121f; --bg:#f6f8fc; --card:#ffffff; --border:#e4e8f2; --muted:#5b6472; }
    body { font-family: "Segoe UI", Arial, sans-serif; margin:0; color:#111; background: var(--bg); }
    .page { padding: 28px; max-width: 980px; margin: 0 auto; }
    .topbar{ background: var(--card); border:1px solid var(--border); border-radius: 18px; padding: 14px 16px;
      display:flex; align-items:center; justify-content:space-between; gap: 16px; }
    .brandWrap{ display:flex; align-items:center; gap: 14px; }
    .logo{ width: 86px; height:auto; display:block; }
    .brand h1 { margin:0; font-size: 18px; color: var(--navy); }
    .muted { color:var(--muted); font-size: 12px; margin-top: 4px; line-height: 1.35; }
    .meta { text-align:right; font-size: 12px; color:var(--muted); line-height: 1.35; }
    .accentBar{ height: 6px; border-radius: 999px; margin-top: 10px;
      background: linear-gradient(90deg, var(--navy), #ffffff 45%, var(--red)); border: 1px solid var(--border); }
    .card { background: var(--card); border:1px solid var(--border); border-radius: 18px; padding: 14px; margin-top: 14px; }
    .grid { display:grid; grid-template-columns: 1fr 1fr; gap: 12px; }
    .label { color:var(--muted); font-size: 12px; font-weight:900; }
    .value { font-size: 13px; margin-top: 3px; line-height: 1.35; }
    table { width:100%; border-collapse: collapse; margin-top: 10px; font-size: 12px; }
    th, td { border-bottom:1px solid var(--border); padding: 10px; vertical-align: top; }
    th { background: #eef3ff; text-align:left; color: var(--navy); }
    td.num, th.num { text-align:right; white-space:nowrap; }
    td.item { width: 52%; }
    .totals { display:flex; justify-content:flex-end; margin-top: 10px; }
    .totals .box { width: 320px; border:1px solid var(--border); border-radius: 18px; padding: 12px; }
    .totals .row { display:flex; justify-content:space-between; font-weight: 950; font-size: 14px; color: var(--navy); }
    .footer { margin-top: 12px; font-size: 11px; color:var(--muted); line-height: 1.35; }
    .btn{ padding:10px 14px; border-radius:14px; border:1px solid var(--border); background:#fff; cursor:pointer;
      font-weight:900; color: var(--navy); }
    @media print {
      .no-print { display:none !important; }
      body { -webkit-print-color-adjust: exact; print-color-adjust: exact; }
      .page { padding: 0.5in; }
    }
  </style>
</head>
<body>
  <div class="page">
    <div class="topbar">
      <div class="brandWrap">
        {% if logo_url %}<img class="logo" src="{{ logo_url }}" alt="Logo" onerror="this.style.display='none'"/>{% endif %}
        <div class="brand">
          <h1>{{ company.name or "Your Company" }} | Shower Estimate</h1>
          <div class="muted">
            {{ company.contact_line }}
            {% if company.address %}<br/>{{ company.address }}{% endif %}
          </div>
        </div>
      </div>
      <div class="meta">
        <div><b>Date:</b> {{ today }}</div>
        <div><b>Estimate #:</b> {{ job.estimate_number or dash }}</div>
      </div>
    </div>

    <div class="accentBar"></div>

    <div class="card grid">
      <div>
        <div class="label">Customer</div>
        <div class="value">
          <b>{{ customer.name or dash }}</b><br/>
          {{ customer.contact_line }}<br/>
          {{ customer.address }}
        </div>
      </div>
      <div>
        <div class="label">Job Summary</div>
        <div class="value">
          <b>Material:</b> {{ job.material }}<br/>
          <b>Backer:</b> {{ job.backer }}<br/>
          <b>Waterproofing:</b> {{ job.waterproofing }}<br/>
          <b>Walls:</b> {{ job.walls }}
        </div>
      </div>
    </div>

    <div class="card">
      <div class="label">Scope / Notes</div>
      <div class="value">{{ job.notes or dash }}</div>
    </div>

    <div class="card">
      <div class="label">Line Items</div>
      <table>
        <thead>
          <tr>
            <th>Item</th>
            <th>Unit</th>
            <th class="num">Qty</th>
            <th class="num">Unit $</th>
            <th class="num">Ext $</th>
          </tr>
        </thead>
        <tbody>
        {% for r in rows %}
          <tr>
            <td class="item">{{ r.name }}</td>
            <td>{{ r.unit }}</td>
            <td class="num">{{ r.qty }}</td>
            <td class="num">{{ dash if r.qty_only else (r.unit_price | money) }}</td>
            <td class="num">{{ dash if r.qty_only else (r.ext | money) }}</td>
          </tr>
        {% endfor %}
        </tbody>
      </table>

      <div class="totals">
        <div class="box">
          <div class="row"><span>Total</span><span>{{ total | money }}</span></div>
        </div>
      </div>

      <div class="footer">{{ footer }}</div>
    </div>

    <div class="no-print" style="margin-top:14px; text-align:right;">
      <button class="btn" onclick="window.print()">Print / Save as PDF</button>
    </div>
  </div>
</body>
</html>
"""

_env = Environment(autoescape=True)
_env.filters["money"] = format_money
_template = _env.from_string(TEMPLATE)


def render_estimate_html(
    company: Party,
    customer: Party,
    job: JobSummary,
    rows: Sequence[LineItem],
    total: float,
    logo_url: str = "",
    today: Optional[date] = None,
) -> str:
    return _template.render(
        company=company,
        customer=customer,
        job=job,
        rows=rows,
        total=total,
        logo_url=logo_url,
        today=(today or date.today()).strftime("%m/%d/%Y"),
        dash=DASH,
        footer=FOOTER,
    )
