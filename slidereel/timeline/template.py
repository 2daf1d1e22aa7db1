"""
Markup and stylesheet fragments for the animated slide document.

Everything needed to render lives inline: no fonts, scripts or images are
fetched over the network.
"""

from __future__ import annotations

import html

STYLESHEET = """
    * {
      margin: 0;
      padding: 0;
      box-sizing: border-box;
    }

    body {
      width: %(width)dpx;
      height: %(height)dpx;
      background: white;
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
      display: flex;
      align-items: center;
      justify-content: center;
      overflow: hidden;
    }

    .slide {
      width: 1600px;
      height: 900px;
      display: flex;
      flex-direction: row;
      gap: 80px;
      padding: 60px;
    }

    .content {
      flex: 1;
      display: flex;
      flex-direction: column;
      gap: 40px;
    }

    .title {
      font-size: 72px;
      font-weight: 700;
      color: #333;
      opacity: 0;
      animation: fadeIn 0.6s ease-out forwards;
    }

    .bullets {
      list-style: none;
      display: flex;
      flex-direction: column;
      gap: 20px;
    }

    .bullets li {
      font-size: 36px;
      color: #555;
      padding-left: 40px;
      position: relative;
      opacity: 0;
      animation: fadeIn 0.5s ease-out forwards;
    }

    .bullets li::before {
      content: "\\2022";
      position: absolute;
      left: 0;
      color: #333;
      font-size: 40px;
    }

    .chart-container {
      flex: 0 0 500px;
      display: flex;
      align-items: center;
      justify-content: center;
    }

    .chart {
      width: 100%%;
      height: 400px;
      display: flex;
      align-items: flex-end;
      justify-content: space-around;
      gap: 20px;
      border-bottom: 3px solid #333;
      padding-bottom: 10px;
    }

    .chart-bar {
      flex: 1;
      height: 100%%;
      display: flex;
      flex-direction: column;
      justify-content: flex-end;
      align-items: center;
      gap: 10px;
      opacity: 0;
      animation: fadeIn 0.6s ease-out forwards;
    }

    .bar-fill {
      width: 100%%;
      background: linear-gradient(180deg, #4A90E2 0%%, #357ABD 100%%);
      border-radius: 8px 8px 0 0;
      display: flex;
      align-items: flex-start;
      justify-content: center;
      padding-top: 10px;
      animation: growUp 0.8s ease-out;
    }

    .bar-value {
      font-size: 28px;
      font-weight: 700;
      color: white;
    }

    .bar-label {
      font-size: 24px;
      color: #555;
      font-weight: 600;
    }

    @keyframes fadeIn {
      from {
        opacity: 0;
        transform: translateY(20px);
      }
      to {
        opacity: 1;
        transform: translateY(0);
      }
    }

    @keyframes growUp {
      from {
        max-height: 0;
      }
      to {
        max-height: 100%%;
      }
    }
"""

DOCUMENT = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=%(width)d, height=%(height)d">
  <title>Slide</title>
  <style>%(stylesheet)s  </style>
  <script type="application/json" id="timeline">%(schedule)s</script>
</head>
<body>
  <div class="slide" data-duration="%(duration)s">
    <div class="content">
%(title)s
      <ul class="bullets">
%(bullets)s
      </ul>
    </div>
%(chart)s
  </div>
</body>
</html>
"""


def escape(text: str) -> str:
    return html.escape(text, quote=True)


def format_seconds(value: float) -> str:
    """Render a delay such as ``0.8s``; stable across float noise."""
    return f"{round(value, 3):g}s"


def format_percent(value: float) -> str:
    return f"{round(value, 2):g}%"


def format_number(value: float) -> str:
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return f"{value:.6g}"


def title_fragment(text: str, delay: float) -> str:
    return (
        f'      <h1 class="title" id="title" data-cue-delay="{format_seconds(delay)}" '
        f'style="animation-delay: {format_seconds(delay)};">{escape(text)}</h1>'
    )


def bullet_fragment(index: int, text: str, delay: float) -> str:
    return (
        f'        <li id="bullet-{index}" data-cue-delay="{format_seconds(delay)}" '
        f'style="animation-delay: {format_seconds(delay)};">{escape(text)}</li>'
    )


def bar_fragment(
    index: int, label: str, value: float, height: float, delay: float
) -> str:
    return (
        f'        <div class="chart-bar" id="bar-{index}" '
        f'data-cue-delay="{format_seconds(delay)}" '
        f'style="animation-delay: {format_seconds(delay)};">\n'
        f'          <div class="bar-fill" style="height: {format_percent(height)};">\n'
        f'            <span class="bar-value">{format_number(value)}</span>\n'
        f"          </div>\n"
        f'          <span class="bar-label">{escape(label)}</span>\n'
        f"        </div>"
    )


def chart_fragment(bars: list[str]) -> str:
    return (
        '    <div class="chart-container">\n'
        '      <div class="chart">\n' + "\n".join(bars) + "\n      </div>\n"
        "    </div>"
    )
