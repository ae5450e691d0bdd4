# app.py
# Run:
#   pip install -e .
#   streamlit run app.py

from __future__ import annotations

import logging
import os
from typing import List, Tuple

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

from surround.estimate import DETAIL_LEVELS, DETAILED, SUMMARY, assemble_line_items, estimate_total, project_view
from surround.preview import WALL_NAMES, panelize_walls, plot_walls
from surround.printout import Party, format_money, job_summary, render_estimate_html
from surround.rules import DEFAULT_PRICES, RULES
from surround.takeoff import Configuration, build_model
from surround.worksheet import COLUMNS, PRICE_COLUMN, prices_from_worksheet, worksheet_frame

load_dotenv()

logging.basicConfig(
    level=os.environ.get("SURROUND_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


# ============================
# CONFIG (all knobs live here)
# ============================
APP = {
    "page_title": "Shower Estimator",
    "layout": "wide",
    "styles": """
        <style>
        :root { --navy:#0b2a4a; --red:#c1121f; }
        .stApp { background: #f6f8fc; }
        h1, h2, h3 { color: var(--navy); }
        </style>
    """,
    "copy": {
        "title": "Shower Estimator",
        "caption": "Shower surround takeoff: panels, adhesives, sealants, trims, backer and waterproofing.",
        "estimate_tab": "Estimate",
        "help_tab": "How to measure",
        "help_md": """
**You only need 4 measurements (in inches):**

1. **Wall 1** – left return wall, from the corner to the front edge.
2. **Back wall** – full width of the back wall.
3. **Wall 3** – right return wall, from the corner to the front edge.
4. **Height** – finished panel height. Typical tub surround is 60–72, full height is 84–96.

Hover the **?** next to any input for a short explanation of what it changes.
        """,
        "summary_note": (
            "Summary hides internal takeoff lines (adhesives, trims, fasteners, accessories), "
            "but the total includes them. Switch to Detailed to see every component."
        ),
    },
}

BASE = Configuration()

DEFAULTS = {
    "detail_level": SUMMARY,
    "customer_name": "",
    "notes": (
        "Remove existing surround as needed, prep substrate, install new system per manufacturer "
        "instructions, seal all joints and penetrations."
    ),
}

LIMITS = {
    "wall_min": 0.0,
    "height_min": 1.0,
    "coats_min": 1,
    "coverage_min": 1.0,
    "banding_waste_min": 0.0,
}

HELP = {
    "customer_name": "Who the estimate is for. This prints on the estimate header.",
    "customer_phone": "Optional. Shown on the printout if provided.",
    "customer_email": "Optional. Shown on the printout if provided.",
    "job_address": "Optional. Use the install location address. Prints on the estimate.",
    "estimate_number": "Optional. Prints in the estimate header.",
    "notes": "Short scope, exclusions, and assumptions. This prints under the customer/job summary.",
    "detail_level": (
        "Summary hides internal takeoff lines but the TOTAL still includes everything. "
        "Detailed shows every component line."
    ),
    "wall1": "Left return wall width in inches (from corner to front edge).",
    "wall2": "Back wall width in inches.",
    "wall3": "Right return wall width in inches (from corner to front edge).",
    "height": "Finished panel height in inches. Typical tub surround is 60–72, full height is 84–96.",
    "material": "Select the panel material. This affects waste %, adhesive coverage, and silicone usage assumptions.",
    "panel": "Select the panel dimensions you plan to use. This changes how many panels are needed.",
    "trim": "Choose 8 ft or 10 ft trim sticks. Used when calculating how many sticks are required.",
    "backer": "Substrate behind the panels. Sheet-based options will calculate board sheets, screws, and tape.",
    "sheet": "Board size used to calculate required sheet count (only when a sheet-based backer is selected).",
    "include_backer": "Adds sheets for the selected backer type to the takeoff/total.",
    "include_backer_screws": "Adds an estimated number of screw boxes for installing the backer.",
    "include_backer_tape": "Adds alkali-resistant mesh tape rolls for seams/corners on sheet-based backers.",
    "include_waterproofing": (
        "Adds waterproofing materials when a sheet-based backer is selected and a waterproofing system is chosen."
    ),
    "waterproofing": "Choose Liquid or Sheet membrane. ‘None’ means waterproofing is not included.",
    "coats": "How many coats of liquid membrane to estimate. Common is 2 coats.",
    "coverage_per_gallon": "Coverage per gallon per coat (sq ft/gal/coat). Used to estimate gallons required.",
    "include_banding": "Adds seam banding for sheet membrane systems.",
    "banding_waste": "Extra allowance for overlaps, cuts, and mistakes (example 0.10 = 10%).",
    "include_adhesive": "Adds panel adhesive tubes based on total square feet and the selected material rule.",
    "include_silicone": "Adds silicone tubes based on perimeter (and seams if you’re not using H-trim).",
    "seams_use_trim": (
        "If checked, vertical seams use H-trim (no silicone on seams). If unchecked, seams are sealed with silicone."
    ),
    "include_inside_corner_trim": "Adds inside corner trim sticks for the two shower corners.",
    "include_edge_trim": "Adds edge/J-trim sticks for the two front edges.",
    "include_top_trim": "Adds horizontal top trim sticks along the combined wall width.",
    "include_bottom_trim": "Adds horizontal bottom trim sticks along the combined wall width.",
    "include_panel_price": (
        "If unchecked, panels show as Qty-only and do not affect the total. If checked, panels are priced and included."
    ),
    "print": "Downloads a printable estimate page you can open in a browser to print or save as PDF.",
}


def company_from_env() -> Party:
    return Party(
        name=os.environ.get("SURROUND_COMPANY_NAME", "HiTecHandyman Services"),
        phone=os.environ.get("SURROUND_COMPANY_PHONE", ""),
        email=os.environ.get("SURROUND_COMPANY_EMAIL", ""),
        address=os.environ.get("SURROUND_COMPANY_ADDRESS", ""),
    )


# ----------------------------
# Streamlit setup
# ----------------------------
def setup_page() -> None:
    st.set_page_config(page_title=APP["page_title"], layout=APP["layout"])
    st.markdown(APP["styles"], unsafe_allow_html=True)
    if "prices" not in st.session_state:
        st.session_state["prices"] = dict(DEFAULT_PRICES)


# ----------------------------
# Validation
# ----------------------------
def validate_inputs(config: Configuration) -> List[str]:
    errors: List[str] = []

    if config.height <= 0:
        errors.append("Height must be greater than 0.")

    if any(w < 0 for w in config.walls):
        errors.append("Wall widths cannot be negative.")
    elif not any(w > 0 for w in config.walls):
        errors.append("At least one wall must be wider than 0.")

    if config.coats < 1:
        errors.append("Liquid membrane needs at least 1 coat.")

    if config.coverage_per_gallon <= 0:
        errors.append("Liquid coverage per gallon must be greater than 0.")

    if config.banding_waste < 0:
        errors.append("Banding waste cannot be negative.")

    return errors


# ----------------------------
# UI: inputs
# ----------------------------
def _select(label: str, catalog, default: str, key: str, **kwargs) -> str:
    keys = [c.key for c in catalog]
    labels = {c.key: c.label for c in catalog}
    return st.selectbox(
        label,
        keys,
        index=keys.index(default),
        format_func=labels.get,
        help=HELP[key],
        key=key,
        **kwargs,
    )


def render_customer_inputs() -> Tuple[Party, str, str]:
    st.subheader("1) Customer")
    c1, c2 = st.columns(2)
    name = c1.text_input("Customer name", DEFAULTS["customer_name"], help=HELP["customer_name"])
    phone = c2.text_input("Customer phone", help=HELP["customer_phone"])
    email = c1.text_input("Customer email", help=HELP["customer_email"])
    address = c2.text_input("Job address", help=HELP["job_address"])
    estimate_number = st.text_input("Estimate #", help=HELP["estimate_number"])
    notes = st.text_area("Scope / Notes", DEFAULTS["notes"], height=110, help=HELP["notes"])
    return Party(name, phone, email, address), notes, estimate_number


def render_configuration_inputs() -> Configuration:
    st.subheader("2) Measurements (in)")
    c1, c2 = st.columns(2)
    wall1 = c1.number_input("Wall 1", min_value=LIMITS["wall_min"], value=BASE.wall1, step=0.5, help=HELP["wall1"])
    wall2 = c2.number_input("Back wall", min_value=LIMITS["wall_min"], value=BASE.wall2, step=0.5, help=HELP["wall2"])
    wall3 = c1.number_input("Wall 3", min_value=LIMITS["wall_min"], value=BASE.wall3, step=0.5, help=HELP["wall3"])
    height = c2.number_input("Height", min_value=LIMITS["height_min"], value=BASE.height, step=0.5, help=HELP["height"])

    st.divider()
    st.subheader("3) System")
    material = _select("Material", RULES.materials, BASE.material, "material")
    rule = RULES.material(material)
    st.caption(
        f"Waste: {rule.waste * 100:.0f}% • Adhesive: {rule.adhesive_coverage:g} sf/tube • "
        f"Silicone: {rule.silicone_coverage:g} lf/tube"
    )
    panel = _select("Panel size", RULES.panel_sizes, BASE.panel, "panel")
    trim = _select("Trim stick length", RULES.trim_lengths, BASE.trim, "trim")

    st.divider()
    st.subheader("4) Backer")
    backer = _select("Backer type", RULES.backer_types, BASE.backer, "backer")
    sheet = _select(
        "Sheet size",
        RULES.sheet_sizes,
        BASE.sheet,
        "sheet",
        disabled=not RULES.backer(backer).requires_sheets,
    )
    include_backer = st.checkbox("Include backer sheets", BASE.include_backer, help=HELP["include_backer"])
    include_backer_screws = st.checkbox(
        "Include backer screws", BASE.include_backer_screws, help=HELP["include_backer_screws"]
    )
    include_backer_tape = st.checkbox("Include mesh tape", BASE.include_backer_tape, help=HELP["include_backer_tape"])

    st.divider()
    st.subheader("5) Waterproofing")
    include_wp = st.checkbox("Include waterproofing", BASE.include_waterproofing, help=HELP["include_waterproofing"])
    system = _select(
        "System",
        RULES.waterproofing_systems,
        BASE.waterproofing,
        "waterproofing",
        disabled=not include_wp,
    )

    coats, coverage = BASE.coats, BASE.coverage_per_gallon
    include_banding, banding_waste = BASE.include_banding, BASE.banding_waste
    if include_wp and system == "liquid":
        c1, c2 = st.columns(2)
        coats = c1.number_input("Coats", min_value=LIMITS["coats_min"], value=int(BASE.coats), step=1, help=HELP["coats"])
        coverage = c2.number_input(
            "Coverage (sf/gal/coat)",
            min_value=LIMITS["coverage_min"],
            value=BASE.coverage_per_gallon,
            step=1.0,
            help=HELP["coverage_per_gallon"],
        )
    if include_wp and system == "sheet":
        include_banding = st.checkbox("Include banding", BASE.include_banding, help=HELP["include_banding"])
        banding_waste = st.number_input(
            "Banding waste (fraction)",
            min_value=LIMITS["banding_waste_min"],
            value=BASE.banding_waste,
            step=0.01,
            help=HELP["banding_waste"],
        )

    st.divider()
    st.subheader("6) Install options")
    include_adhesive = st.checkbox("Include adhesive", BASE.include_adhesive, help=HELP["include_adhesive"])
    include_silicone = st.checkbox("Include silicone", BASE.include_silicone, help=HELP["include_silicone"])
    seams_use_trim = st.checkbox(
        "Seams use H-joint trim (not sealant)", BASE.seams_use_trim, help=HELP["seams_use_trim"]
    )
    include_inside = st.checkbox(
        "Inside corner trim", BASE.include_inside_corner_trim, help=HELP["include_inside_corner_trim"]
    )
    include_edge = st.checkbox("Edge/J-trim", BASE.include_edge_trim, help=HELP["include_edge_trim"])
    include_top = st.checkbox("Top trim", BASE.include_top_trim, help=HELP["include_top_trim"])
    include_bottom = st.checkbox("Bottom trim", BASE.include_bottom_trim, help=HELP["include_bottom_trim"])

    st.divider()
    st.subheader("7) Pricing")
    include_panel_price = st.checkbox(
        "Include panel price in total", BASE.include_panel_price, help=HELP["include_panel_price"]
    )

    return Configuration(
        wall1=wall1,
        wall2=wall2,
        wall3=wall3,
        height=height,
        material=material,
        panel=panel,
        trim=trim,
        backer=backer,
        sheet=sheet,
        waterproofing=system,
        include_adhesive=include_adhesive,
        include_silicone=include_silicone,
        seams_use_trim=seams_use_trim,
        include_inside_corner_trim=include_inside,
        include_edge_trim=include_edge,
        include_top_trim=include_top,
        include_bottom_trim=include_bottom,
        include_backer=include_backer,
        include_backer_screws=include_backer_screws,
        include_backer_tape=include_backer_tape,
        include_waterproofing=include_wp,
        include_banding=include_banding,
        include_panel_price=include_panel_price,
        coats=coats,
        coverage_per_gallon=coverage,
        banding_waste=banding_waste,
        prices=st.session_state["prices"],
    )


# ----------------------------
# UI: estimate
# ----------------------------
def render_worksheet(rows, config: Configuration) -> None:
    edited = st.data_editor(
        worksheet_frame(rows),
        use_container_width=True,
        disabled=[c for c in COLUMNS if c != PRICE_COLUMN],
        column_config={
            PRICE_COLUMN: st.column_config.NumberColumn(min_value=0.0, step=0.01, format="$%.2f"),
            "Ext $": st.column_config.NumberColumn(format="$%.2f"),
        },
    )

    # Unit prices are bound by price key; a change re-runs the whole pipeline.
    prices = prices_from_worksheet(edited, rows, config.prices)
    if prices != dict(config.prices):
        logger.info("Unit prices updated: %s", {k: v for k, v in prices.items() if config.prices.get(k) != v})
        st.session_state["prices"] = prices
        st.rerun()


def render_help_tab() -> None:
    st.subheader("How to measure")
    st.markdown(APP["copy"]["help_md"])


def render_estimate_tab() -> None:
    left, right = st.columns([1.0, 1.3], gap="large")

    with left:
        customer, notes, estimate_number = render_customer_inputs()
        st.divider()
        detail_level = st.selectbox(
            "Detail level (display only)",
            DETAIL_LEVELS,
            index=DETAIL_LEVELS.index(DEFAULTS["detail_level"]),
            format_func=lambda d: "Summary (customer-facing)" if d == SUMMARY else "Detailed (contractor takeoff)",
            help=HELP["detail_level"],
        )
        st.caption("Total is always based on the full takeoff, so Summary and Detailed match.")
        st.divider()
        config = render_configuration_inputs()

    errors = validate_inputs(config)
    if errors:
        with right:
            for e in errors:
                st.error(e)
        st.stop()

    model = build_model(config)
    items = assemble_line_items(model, config)
    total = estimate_total(items)
    rows = project_view(items, detail_level)

    with left:
        st.caption(f"WP enabled: {'Yes' if model.wp_enabled else 'No'} (requires sheet-based backer)")
        if model.liquid_gallons:
            st.caption(f"Est: {model.liquid_gallons} gallon(s), fabric rolls: {model.fabric_rolls}")
        if model.membrane_area:
            st.caption(
                f"Est: membrane {model.membrane_area} sf, banding {model.banding_length} lf, "
                f"corners {model.preformed_corners}"
            )

    with right:
        st.subheader("Estimate")
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Area (w/ waste)", f"{model.total_area:.2f} sf")
        c2.metric("Panels", model.panels)
        c3.metric("View", "Detailed" if detail_level == DETAILED else "Summary")
        c4.metric("Total", format_money(total))

        render_worksheet(rows, config)
        st.markdown(f"**Total: {format_money(total)}**")

        if len(rows) != len(items):
            st.caption(APP["copy"]["summary_note"])

        html = render_estimate_html(
            company=company_from_env(),
            customer=customer,
            job=job_summary(config, notes=notes, estimate_number=estimate_number),
            rows=rows,
            total=total,
            logo_url=os.environ.get("SURROUND_LOGO_URL", ""),
        )
        st.download_button(
            "Print / Save as PDF (HTML)",
            data=html,
            file_name=f"estimate-{estimate_number or 'draft'}.html",
            mime="text/html",
            help=HELP["print"],
            use_container_width=True,
        )

        st.subheader("Wall layout preview")
        pieces = panelize_walls(config)
        st.plotly_chart(plot_walls(config, pieces), use_container_width=True)

        with st.expander("Installer details (cut list / intermediate math)"):
            df = pd.DataFrame(
                [
                    {
                        "Wall": WALL_NAMES[p.wall - 1],
                        "Piece #": p.idx,
                        "Start (in)": round(p.u0, 2),
                        "End (in)": round(p.u1, 2),
                        "Width (in)": round(p.width, 2),
                        "Note": p.note,
                    }
                    for p in pieces
                ]
            )
            st.dataframe(df, use_container_width=True)

            st.write(f"**Base area:** {model.base_area:.2f} sf")
            st.write(f"**Perimeter:** {model.perimeter_length:.2f} lf")
            st.write(
                f"**Seams:** {model.seams.total_seam_count} ({model.seams.total_seam_length:.2f} lf) • "
                f"**Sealant run:** {model.sealant_length:.2f} lf"
            )
            if model.backer_sheets:
                st.write(f"**Screws:** {model.screw_count} • **Mesh tape:** {model.tape_length:.2f} lf")


# ----------------------------
# App entry
# ----------------------------
def main() -> None:
    setup_page()

    st.title(APP["copy"]["title"])
    st.caption(APP["copy"]["caption"])

    tab_est, tab_help = st.tabs([APP["copy"]["estimate_tab"], APP["copy"]["help_tab"]])
    with tab_help:
        render_help_tab()
    with tab_est:
        render_estimate_tab()


if __name__ == "__main__":
    main()
