"""
Quick demo: watch the bodies bounce.
Run: python demo.py
Press Q or close window to exit, SPACE to pause.
"""
import logging

from ballpit.engine import PitConfig
from ballpit.loop import SimulationLoop
from ballpit.renderer import Renderer, AppearanceConfig
import ballpit as P

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')

# Pit using centralized defaults
config = PitConfig(seed=P.SEED)
loop = SimulationLoop(config)

print(f"Bodies: {len(loop)} | viewport {config.width}x{config.height} | fps {P.FPS}")

renderer = Renderer(AppearanceConfig())
renderer.play(loop, fps=P.FPS)

print(f"Ticks: {loop.tick_count} | collisions: {loop.collision_count}")
