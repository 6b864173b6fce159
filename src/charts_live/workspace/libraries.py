"""Metadata for the charting libraries a workspace can be created for."""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class ChartLibrary:
    """
    A supported charting library.

    Attributes:
        id: Identifier used by the initialize command
        name: Display name
        instructions: Usage notes written into the README
        cdn_links: Script URLs included by index.html, in load order
        chart_container: HTML element the example chart renders into
    """
    id: str
    name: str
    instructions: str
    cdn_links: Tuple[str, ...]
    chart_container: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "instructions": self.instructions,
            "cdn_links": list(self.cdn_links),
        }


AMCHARTS = ChartLibrary(
    id="amcharts",
    name="amCharts 5",
    instructions="""\
Use amCharts 5 for data visualization. Key patterns:

1. Create root element:
   const root = am5.Root.new("chartdiv");

2. Apply dark theme:
   root.setThemes([am5themes_Animated.new(root)]);

3. Create chart (example XY chart):
   const chart = root.container.children.push(
     am5xy.XYChart.new(root, {
       panX: true,
       panY: true,
       wheelX: "panX",
       wheelY: "zoomX"
     })
   );

4. Add axes and series with your data.

5. Always dispose on cleanup:
   root.dispose();

Use modern ES6+ syntax. The HTML already includes all necessary CDN scripts.""",
    cdn_links=(
        "https://cdn.amcharts.com/lib/5/index.js",
        "https://cdn.amcharts.com/lib/5/xy.js",
        "https://cdn.amcharts.com/lib/5/themes/Animated.js",
    ),
    chart_container='<div id="chartdiv" style="width: 100%; height: 500px;"></div>',
)

CHARTJS = ChartLibrary(
    id="chartjs",
    name="Chart.js",
    instructions="""\
Use Chart.js for simple, responsive charts. Key patterns:

1. Get canvas context:
   const ctx = document.getElementById('chartCanvas').getContext('2d');

2. Create chart:
   const myChart = new Chart(ctx, {
     type: 'bar', // or 'line', 'pie', 'doughnut', etc.
     data: {
       labels: ['Red', 'Blue', 'Yellow'],
       datasets: [{
         label: 'My Dataset',
         data: [12, 19, 3],
         backgroundColor: ['rgba(255,99,132,0.2)', ...]
       }]
     },
     options: {
       responsive: true,
       plugins: {
         legend: { position: 'top' },
         title: { display: true, text: 'Chart Title' }
       }
     }
   });

3. Destroy on cleanup:
   myChart.destroy();""",
    cdn_links=("https://cdn.jsdelivr.net/npm/chart.js",),
    chart_container='<canvas id="chartCanvas"></canvas>',
)

# Insertion order is the order libraries are listed to callers
SUPPORTED_LIBRARIES: Dict[str, ChartLibrary] = {
    library.id: library for library in (AMCHARTS, CHARTJS)
}
