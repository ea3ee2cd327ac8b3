"""ASCII waveform rendering for terminal display."""

from collections.abc import Sequence

import numpy as np

from dinamap.analysis.types import EventCounters
from dinamap.constants import (
    DEFAULT_PLOT_HEIGHT,
    DEFAULT_PLOT_WIDTH,
    WaveformConstants,
)


def _format_time_offset(seconds: float) -> str:
    """Format seconds to HH:MM:SS."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


class AsciiWaveformRenderer:
    """Render decoded waveform samples as ASCII art for terminal display."""

    def __init__(
        self,
        width: int = DEFAULT_PLOT_WIDTH,
        height: int = DEFAULT_PLOT_HEIGHT,
        show_summary: bool = True,
    ):
        """
        Initialize renderer.

        Args:
            width: Chart width in characters (default: 80)
            height: Chart height in lines (default: 20)
            show_summary: Whether to list session totals under the chart
        """
        if width < 10 or height < 2:
            raise ValueError(f"Chart too small: {width}x{height}")
        self.width = width
        self.height = height
        self.show_summary = show_summary

    def render(
        self,
        samples: Sequence[int] | np.ndarray,
        sample_interval: float = WaveformConstants.SAMPLE_INTERVAL_SECONDS,
        counters: EventCounters | None = None,
        title: str | None = None,
    ) -> str:
        """
        Generate ASCII representation of waveform.

        Args:
            samples: Waveform samples in emission order
            sample_interval: Seconds between samples (default: 5 ms)
            counters: Session totals to list under the chart
            title: Chart title

        Returns:
            ASCII art string
        """
        values = np.asarray(samples, dtype=np.int32)
        if len(values) == 0:
            return "No waveform samples"

        lines = []
        duration = len(values) * sample_interval

        if title is not None:
            lines.append(title)
            lines.append(
                f"Sample rate: {1 / sample_interval:.0f}Hz | Samples: {len(values)}"
            )
            lines.append("")

        y_label_width = 6
        chart_width = self.width - y_label_width - 1

        step = max(1, len(values) // chart_width)
        sampled = values[::step][:chart_width]

        min_val = float(np.min(sampled))
        max_val = float(np.max(sampled))
        val_range = max_val - min_val if max_val != min_val else 1.0

        for row in range(self.height):
            row_val = max_val - (row / (self.height - 1)) * val_range

            line = f"{row_val:>5.0f} │"

            for col in range(len(sampled)):
                normalized = (sampled[col] - min_val) / val_range
                point_row = int((1 - normalized) * (self.height - 1))
                line += "●" if point_row == row else " "

            lines.append(line)

        x_axis = " " * y_label_width + "└" + "─" * len(sampled)
        lines.append(x_axis)

        start_time_str = _format_time_offset(0.0)
        end_time_str = _format_time_offset(duration)
        spacing = max(0, chart_width - len(start_time_str) - len(end_time_str))
        lines.append(f"{' ' * y_label_width} {start_time_str}{' ' * spacing}{end_time_str}")

        if self.show_summary and counters is not None:
            lines.append("")
            lines.append("Session totals:")
            for summary in counters.summary_lines():
                lines.append(f"  {summary}")

        return "\n".join(lines)
