"""
Starter file templates for chart workspaces.

Each workspace gets:
- index.html: loads the library from its CDN, the user's chart.js, and a
  small EventSource client that reloads the page on ``reload`` events
- chart.js: a working example chart for the library
- README.md: paths, instructions and the development workflow
"""

from pathlib import Path

from .libraries import ChartLibrary

INDEX_HTML = "index.html"
CHART_JS = "chart.js"
README_MD = "README.md"

_HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{name} Chart</title>
  <style>
    * {{
      margin: 0;
      padding: 0;
      box-sizing: border-box;
    }}

    body {{
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Arial, sans-serif;
      background: #0a0a0a;
      color: #ffffff;
      padding: 20px;
    }}

    #status {{
      position: fixed;
      top: 20px;
      right: 20px;
      padding: 8px 16px;
      background: #4CAF50;
      color: white;
      border-radius: 6px;
      font-family: 'Monaco', 'Courier New', monospace;
      font-size: 12px;
      box-shadow: 0 2px 8px rgba(0,0,0,0.3);
      z-index: 1000;
      transition: all 0.3s ease;
    }}

    h1 {{
      margin-bottom: 20px;
      font-size: 24px;
      font-weight: 600;
    }}

    #chartdiv, #chartCanvas {{
      background: #1a1a1a;
      border-radius: 8px;
      box-shadow: 0 4px 12px rgba(0,0,0,0.5);
    }}
  </style>
</head>
<body>
  <div id="status">● Connected</div>
  <h1>{name} Visualization</h1>
  {container}

  <!-- CDN Scripts -->
{cdn_scripts}

  <!-- Your Chart Code -->
  <script src="chart.js"></script>

  <!-- Live Reload via SSE -->
  <script>
    const statusEl = document.getElementById('status');
    const eventSource = new EventSource('/events');

    eventSource.onmessage = (event) => {{
      if (event.data === 'reload') {{
        statusEl.textContent = '↻ Reloading...';
        statusEl.style.background = '#FF9800';
        setTimeout(() => location.reload(), 100);
      }}
    }};

    eventSource.onerror = () => {{
      statusEl.textContent = '● Disconnected';
      statusEl.style.background = '#f44336';
      setTimeout(() => {{
        eventSource.close();
        location.reload();
      }}, 2000);
    }};

    eventSource.onopen = () => {{
      statusEl.textContent = '● Connected';
      statusEl.style.background = '#4CAF50';
    }};
  </script>
</body>
</html>
"""

_AMCHARTS_EXAMPLE = """// amCharts 5 Example
// Create root element
const root = am5.Root.new("chartdiv");

// Set themes
root.setThemes([
  am5themes_Animated.new(root)
]);

// Create chart
const chart = root.container.children.push(
  am5xy.XYChart.new(root, {
    panX: true,
    panY: true,
    wheelX: "panX",
    wheelY: "zoomX"
  })
);

// Add cursor
const cursor = chart.set("cursor", am5xy.XYCursor.new(root, {}));
cursor.lineY.set("visible", false);

// Create axes
const xAxis = chart.xAxes.push(
  am5xy.CategoryAxis.new(root, {
    categoryField: "category",
    renderer: am5xy.AxisRendererX.new(root, {
      minGridDistance: 30
    })
  })
);

const yAxis = chart.yAxes.push(
  am5xy.ValueAxis.new(root, {
    renderer: am5xy.AxisRendererY.new(root, {})
  })
);

// Add series
const series = chart.series.push(
  am5xy.ColumnSeries.new(root, {
    name: "Series",
    xAxis: xAxis,
    yAxis: yAxis,
    valueYField: "value",
    categoryXField: "category"
  })
);

// Sample data
const data = [
  { category: "A", value: 100 },
  { category: "B", value: 200 },
  { category: "C", value: 150 },
  { category: "D", value: 300 }
];

xAxis.data.setAll(data);
series.data.setAll(data);

// Make stuff animate on load
series.appear(1000);
chart.appear(1000, 100);
"""

_CHARTJS_EXAMPLE = """// Chart.js Example
const ctx = document.getElementById('chartCanvas').getContext('2d');

const myChart = new Chart(ctx, {
  type: 'bar',
  data: {
    labels: ['Red', 'Blue', 'Yellow', 'Green', 'Purple', 'Orange'],
    datasets: [{
      label: '# of Votes',
      data: [12, 19, 3, 5, 2, 3],
      backgroundColor: [
        'rgba(255, 99, 132, 0.2)',
        'rgba(54, 162, 235, 0.2)',
        'rgba(255, 206, 86, 0.2)',
        'rgba(75, 192, 192, 0.2)',
        'rgba(153, 102, 255, 0.2)',
        'rgba(255, 159, 64, 0.2)'
      ],
      borderColor: [
        'rgba(255, 99, 132, 1)',
        'rgba(54, 162, 235, 1)',
        'rgba(255, 206, 86, 1)',
        'rgba(75, 192, 192, 1)',
        'rgba(153, 102, 255, 1)',
        'rgba(255, 159, 64, 1)'
      ],
      borderWidth: 1
    }]
  },
  options: {
    responsive: true,
    plugins: {
      legend: {
        position: 'top',
      },
      title: {
        display: true,
        text: 'Sample Chart'
      }
    },
    scales: {
      y: {
        beginAtZero: true
      }
    }
  }
});
"""

_EXAMPLES = {
    "amcharts": _AMCHARTS_EXAMPLE,
    "chartjs": _CHARTJS_EXAMPLE,
}

_FALLBACK_EXAMPLE = "// Chart code here\nconsole.log('Initialize your chart');\n"

_README_TEMPLATE = """# {name} Workspace

**Workspace Path:** `{workspace}`

## Files

- `index.html` - Main HTML file with live reload
- `chart.js` - Your chart implementation
- `README.md` - This file

## Instructions

{instructions}

## Development

1. The workspace is served at {url}
2. Edit `chart.js` to modify the chart
3. Changes trigger automatic reload via SSE

## Library Documentation

- {name}: {docs_link}
"""


def render_index_html(library: ChartLibrary) -> str:
    """Render index.html for a library."""
    cdn_scripts = "\n".join(
        f'  <script src="{link}"></script>' for link in library.cdn_links
    )
    return _HTML_TEMPLATE.format(
        name=library.name,
        container=library.chart_container,
        cdn_scripts=cdn_scripts,
    )


def render_chart_js(library: ChartLibrary) -> str:
    """Render the example chart.js for a library."""
    return _EXAMPLES.get(library.id, _FALLBACK_EXAMPLE)


def render_readme(library: ChartLibrary, workspace: Path, url: str) -> str:
    """Render README.md for a workspace."""
    return _README_TEMPLATE.format(
        name=library.name,
        workspace=workspace,
        instructions=library.instructions,
        url=url,
        docs_link=library.cdn_links[0] if library.cdn_links else "",
    )
