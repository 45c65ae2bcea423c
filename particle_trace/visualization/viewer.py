# particle_trace/visualization/viewer.py
"""
Interactive matplotlib front-end for a SimulationSession.

Keys:
  SPACE  pause / resume
  ENTER  end simulation (reconstruct trajectory)
  N      new simulation
  P      plot / unplot recorded trace (after the simulation ended)
The slider scrubs through the reconstructed trajectory once the simulation has ended.
"""
import logging
import time

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.widgets import Slider

from particle_trace.config import settings
from particle_trace.config.settings import clamp_unit
from particle_trace.simulation.session import FrameInput, SessionState, SimulationSession

logger = logging.getLogger(__name__)

_KEY_TRIGGERS = {
    " ": "toggle_pause",
    "enter": "end_simulation",
    "n": "new_run",
    "p": "toggle_trace",
}

_STATUS = {
    SessionState.PAUSED: "simulation: PAUSED  [SPACE] - resume  [N] - new simulation  [ENTER] - end",
    SessionState.RUNNING: "simulation: ON  [SPACE] - pause  [ENTER] - end simulation",
    SessionState.STOPPED: "simulation: OFF  [N] - new simulation  [P] - plot/unplot graph",
}


def _release_default_keymaps():
    # matplotlib binds 'p' to pan by default
    for name in ("keymap.pan",):
        plt.rcParams[name] = [k for k in plt.rcParams[name] if k not in _KEY_TRIGGERS]


class TrajectoryViewer:
    def __init__(self, session: SimulationSession):
        self.session = session
        self._pending = {name: False for name in _KEY_TRIGGERS.values()}
        self._pointer = None
        self._updating_slider = False
        self.timer = None

        _release_default_keymaps()
        self._build_figure()
        self._connect_events()
        self.render(self.session.snapshot())

    # --------------------------------------------------------------------- UI
    def _build_figure(self):
        self.fig = plt.figure(figsize=(11, 6.5))
        self.ax3d = self.fig.add_axes([0.0, 0.05, 0.68, 0.85], projection="3d")
        self.ax3d.set_xlabel("X")
        self.ax3d.set_ylabel("Y")
        self.ax3d.set_zlabel("Z")
        self.ax3d.set_title("Particle Simulation - Lagrange Interpolation")

        self.half_extent = settings.GRID_SLICES * settings.SCALE / 2.0
        self._set_limits(np.zeros((1, 3)))

        self.particle_plot, = self.ax3d.plot([], [], [], "o", color="orange", markersize=9)
        self.trace_plot, = self.ax3d.plot([], [], [], color="purple", linewidth=1.2)
        self.trace_plot.set_visible(False)

        self.status_text = self.fig.text(0.02, 0.96, "", fontsize=10, color="dimgray")
        self.info_text = self.fig.text(0.71, 0.62, "", fontsize=10, family="monospace", va="top")

        self.slider_ax = self.fig.add_axes([0.74, 0.30, 0.22, 0.03])
        self.slider = Slider(self.slider_ax, "t", 0.0, 1.0, valinit=0.0)
        self.slider.valtext.set_visible(False)
        self.slider_ax.set_visible(False)

    def _connect_events(self):
        self.fig.canvas.mpl_connect("key_press_event", self._on_key)
        self.slider.on_changed(self._on_slider)

    def _set_limits(self, points):
        lo = np.minimum(points.min(axis=0), -self.half_extent)
        hi = np.maximum(points.max(axis=0), self.half_extent)
        self.ax3d.set_xlim(lo[0], hi[0])
        self.ax3d.set_ylim(lo[1], hi[1])
        self.ax3d.set_zlim(lo[2], hi[2])

    # ----------------------------------------------------------------- events
    def _on_key(self, event):
        name = _KEY_TRIGGERS.get(event.key)
        if name is not None:
            self._pending[name] = True

    def _on_slider(self, value):
        if self._updating_slider:
            return
        self._pointer = clamp_unit(value)

    # ------------------------------------------------------------------ frame
    def step_frame(self, now_ms=None):
        """
        Build one FrameInput from pending events, tick the session and redraw.
        """
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        frame = FrameInput(timestamp_ms=int(now_ms), pointer=self._pointer, **self._pending)
        self._pending = {name: False for name in self._pending}
        self._pointer = None

        out = self.session.tick(frame)
        if frame.new_run:
            self._set_slider(0.0)
        self.render(out)
        self.fig.canvas.draw_idle()
        return out

    def _set_slider(self, p):
        self._updating_slider = True
        try:
            self.slider.set_val(p)
        finally:
            self._updating_slider = False

    def render(self, out):
        pos = out.position
        self.particle_plot.set_data_3d([pos.x], [pos.y], [pos.z])

        trace = np.array([tuple(s.position) for s in out.samples], dtype=float).reshape(-1, 3)
        self.trace_plot.set_data_3d(trace[:, 0], trace[:, 1], trace[:, 2])
        self.trace_plot.set_visible(out.show_trace and len(trace) > 1)
        self._set_limits(np.vstack([trace, pos.to_array()]))

        self.status_text.set_text(_STATUS[out.state])

        lines = [
            "Pos:",
            f"  x: {pos.x:.6f}",
            f"  y: {pos.y:.6f}",
            f"  z: {pos.z:.6f}",
        ]
        if out.scrub_time is not None:
            lines.append(f"Time: {out.scrub_time:.6f}s")
        if out.speed is not None:
            lines.append(f"Velo: {out.speed:.6f}m/s")
        if out.acceleration_magnitude is not None:
            lines.append(f"Acce: {out.acceleration_magnitude:.6f}m/s²")
        self.info_text.set_text("\n".join(lines))

        scrubbing = out.state == SessionState.STOPPED and out.scrub_position is not None
        self.slider_ax.set_visible(scrubbing)
        if scrubbing and abs(self.slider.val - out.scrub_position) > 1e-9:
            self._set_slider(out.scrub_position)

    # ----------------------------------------------------------------- timer
    def start(self):
        self.timer = self.fig.canvas.new_timer(interval=settings.FRAME_INTERVAL_MS)
        self.timer.add_callback(self.step_frame)
        self.timer.start()
        logger.info("Viewer started (frame interval %d ms)", settings.FRAME_INTERVAL_MS)

    def stop(self):
        if self.timer is not None:
            self.timer.stop()
            self.timer = None


def launch_viewer(session=None):
    """
    Open the interactive window and block until it is closed.
    """
    viewer = TrajectoryViewer(session if session is not None else SimulationSession())
    viewer.start()
    plt.show()
    viewer.stop()
    return viewer
