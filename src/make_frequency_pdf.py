#!/usr/bin/env python3
"""
make_frequency_pdf.py
Render a letterfreq report file as a landscape A4 PDF of bar charts,
four charts per page (2x2), followed by a chart of the combined totals.

Usage:
  python make_frequency_pdf.py results.txt

Or with custom parameters:
  python make_frequency_pdf.py results.txt --out charts.pdf --per-page 2 --no-combined
"""

from __future__ import annotations

import argparse
import datetime
import sys
from functools import reduce
from pathlib import Path
from typing import List, Sequence

import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

from contracts.frequency import ALPHABET, FrequencyTable
from contracts.report import ReportBlock, parse_report

INCH_PER_CM = 0.3937007874
PAGE_W_IN = 29.7 * INCH_PER_CM  # A4 landscape width
PAGE_H_IN = 21.0 * INCH_PER_CM  # A4 landscape height

COMBINED_SOURCE = "All files combined"


def paginate(blocks: Sequence[ReportBlock], per_page: int) -> List[List[ReportBlock]]:
    if per_page < 1:
        raise ValueError("per_page must be positive")
    return [list(blocks[i : i + per_page]) for i in range(0, len(blocks), per_page)]


def combined_block(blocks: Sequence[ReportBlock]) -> ReportBlock:
    total = reduce(lambda acc, block: acc + block.table, blocks, FrequencyTable())
    return ReportBlock(source=COMBINED_SOURCE, table=total)


def _grid_shape(per_page: int) -> tuple[int, int]:
    cols = 1 if per_page == 1 else 2
    rows = (per_page + cols - 1) // cols
    return rows, cols


def draw_chart(ax, block: ReportBlock) -> None:
    counts = block.table.counts
    ax.bar(range(len(ALPHABET)), counts, color="0.35", width=0.8)
    ax.set_xticks(range(len(ALPHABET)))
    ax.set_xticklabels(list(ALPHABET), fontsize=7)
    ax.tick_params(axis="y", labelsize=7)
    ax.set_xlim(-0.6, len(ALPHABET) - 0.4)
    ax.set_title(f"{block.source}  (letters: {block.table.total()})", fontsize=9)
    for side in ("top", "right"):
        ax.spines[side].set_visible(False)


def render_pdf(
    blocks: Sequence[ReportBlock],
    out_path: Path,
    *,
    per_page: int = 4,
    combined: bool = True,
    margin_cm: float = 2.0,
    gap_cm: float = 1.5,
) -> int:
    """Write ``blocks`` to ``out_path`` and return the number of pages."""

    charts = list(blocks)
    if combined and charts:
        charts.append(combined_block(blocks))
    pages = paginate(charts, per_page)

    rows, cols = _grid_shape(per_page)
    margin_in = margin_cm * INCH_PER_CM
    gap_in = gap_cm * INCH_PER_CM
    cell_w = (PAGE_W_IN - 2 * margin_in - (cols - 1) * gap_in) / cols
    cell_h = (PAGE_H_IN - 2 * margin_in - (rows - 1) * gap_in) / rows
    # Footer sits 1cm above the bottom edge.
    footer_y = (1.0 * INCH_PER_CM) / PAGE_H_IN
    stamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M")

    with PdfPages(out_path) as pdf:
        for page_num, page in enumerate(pages, start=1):
            fig = plt.figure(figsize=(PAGE_W_IN, PAGE_H_IN))
            for idx, block in enumerate(page):
                row, col = divmod(idx, cols)
                left = margin_in + col * (cell_w + gap_in)
                bottom = PAGE_H_IN - margin_in - (row + 1) * cell_h - row * gap_in
                ax = fig.add_axes([left / PAGE_W_IN, bottom / PAGE_H_IN, cell_w / PAGE_W_IN, cell_h / PAGE_H_IN])
                draw_chart(ax, block)
            fig.text(
                0.5,
                footer_y,
                f"Letter frequencies    page {page_num}/{len(pages)}    generated {stamp}",
                ha="center",
                va="bottom",
                fontsize=8,
            )
            pdf.savefig(fig)
            plt.close(fig)
    return len(pages)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a letterfreq report as PDF bar charts.")
    parser.add_argument("report", help="Report file written by letterfreq")
    parser.add_argument("--out", default=None, help="Output PDF path. If not set, a name with a timestamp is generated automatically.")
    parser.add_argument("--per-page", type=int, default=4, help="Charts per page (default: 4)")
    parser.add_argument("--no-combined", action="store_true", help="Skip the combined totals chart")
    parser.add_argument("--margin-cm", type=float, default=2.0, help="Margin around page in cm (default: 2.0)")
    parser.add_argument("--gap-cm", type=float, default=1.5, help="Gap between charts in cm (default: 1.5)")
    return parser


def main(argv: List[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    report_path = Path(args.report)
    try:
        blocks = parse_report(report_path.read_text(encoding="utf-8", errors="surrogateescape"))
    except OSError as exc:
        print(f"Cannot read report {report_path}: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Malformed report {report_path}: {exc}", file=sys.stderr)
        return 1
    if not blocks:
        print(f"Report {report_path} contains no blocks", file=sys.stderr)
        return 1

    if args.out:
        out_path = Path(args.out)
    else:
        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        out_path = Path(f"letter_frequencies_{timestamp}.pdf")

    pages = render_pdf(
        blocks,
        out_path,
        per_page=args.per_page,
        combined=not args.no_combined,
        margin_cm=args.margin_cm,
        gap_cm=args.gap_cm,
    )
    print(f"PDF with {pages} page(s) and {len(blocks)} report(s) saved to: {out_path.resolve()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
