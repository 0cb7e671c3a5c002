"""Pygame framer drawing the render data of a tree engine."""

import pygame
import numpy as np
from typing import Dict, Any, List, Optional, Tuple
from bsttrainer.node import Highlight, Marker
from bsttrainer.step_gate import StepMode


NODE_RADIUS = 20

# Keys that act on the number typed so far
KEYED_COMMANDS = {
    pygame.K_i: 'insert',
    pygame.K_d: 'delete',
    pygame.K_s: 'search',
}

# Keys that need no number
PLAIN_COMMANDS = {
    pygame.K_p: 'pre_order',
    pygame.K_o: 'in_order',
    pygame.K_u: 'post_order',
    pygame.K_b: 'balance',
    pygame.K_c: 'clear',
    pygame.K_r: 'random_fill',
    pygame.K_t: 'toggle_discipline',
    pygame.K_m: 'toggle_step_mode',
    pygame.K_SPACE: 'advance_step',
    pygame.K_n: 'advance_step',
    pygame.K_ESCAPE: 'quit',
    pygame.K_q: 'quit',
}


class PygameFramer:
    """Pygame framer that draws nodes, edges, markers and an info panel."""

    def __init__(self, window_size: Tuple[int, int] = (1200, 800)):
        """
        Initialize framer.

        Args:
            window_size: Window size (width, height)
        """
        self.window_size = window_size

        # Colors
        self.colors = {
            'background': (20, 20, 30),
            'node': (255, 159, 28),
            'edge': (255, 255, 255),
            'outline': (255, 255, 255),
            'marker': (0, 245, 255),
            'text': (255, 255, 255),
            'hint': (150, 150, 150),
            'message': (255, 80, 80),
        }
        self.highlight_colors = {
            Highlight.SEARCH_PATH: (0, 255, 0),
            Highlight.TRAVERSAL: (57, 255, 20),
            Highlight.IMBALANCE: (255, 0, 0),
        }

        # Number typed so far
        self.input_buffer = ""

    def start(self):
        # Initialize Pygame
        pygame.init()
        self.screen = pygame.display.set_mode(self.window_size, pygame.RESIZABLE)
        pygame.display.set_caption("BST Trainer")
        # Font
        self.font = pygame.font.Font(None, 24)
        self.small_font = pygame.font.Font(None, 18)

    def poll_commands(self) -> List[Tuple[str, Optional[str]]]:
        """
        Translate pending window events into controller commands.

        Returns:
            List of (command name, argument) pairs
        """
        commands = []
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                commands.append(('quit', None))
            elif event.type == pygame.VIDEORESIZE:
                self.window_size = (event.w, event.h)
                commands.append(('resize', str(event.w)))
            elif event.type == pygame.KEYDOWN:
                if event.unicode and event.unicode.isdigit():
                    self.input_buffer += event.unicode
                elif event.key == pygame.K_MINUS and not self.input_buffer:
                    self.input_buffer = "-"
                elif event.key == pygame.K_BACKSPACE:
                    self.input_buffer = self.input_buffer[:-1]
                elif event.key in KEYED_COMMANDS:
                    commands.append((KEYED_COMMANDS[event.key], self.input_buffer))
                    self.input_buffer = ""
                elif event.key in PLAIN_COMMANDS:
                    commands.append((PLAIN_COMMANDS[event.key], None))
        return commands

    def _screen_pos(self, position: np.ndarray) -> Tuple[int, int]:
        return int(position[0]), int(position[1])

    def _draw_text(self, text: str, pos: tuple, font=None, color=None):
        """Draw text on screen."""
        if font is None:
            font = self.font
        if color is None:
            color = self.colors['text']
        text_surface = font.render(text, True, color)
        self.screen.blit(text_surface, pos)

    def _draw_node(self, key, position: np.ndarray, highlight: Highlight = Highlight.NONE,
                   marker: Marker = Marker.NONE):
        center = self._screen_pos(position)
        fill = self.highlight_colors.get(highlight, self.colors['node'])
        pygame.draw.circle(self.screen, fill, center, NODE_RADIUS)
        pygame.draw.circle(self.screen, self.colors['outline'], center, NODE_RADIUS, 2)

        label = self.font.render(str(key), True, self.colors['text'])
        self.screen.blit(label, label.get_rect(center=center))

        if marker is not Marker.NONE:
            self._draw_marker(center, marker)

    def _draw_marker(self, center: Tuple[int, int], marker: Marker):
        """Draw the traversal arrow pointing at a node."""
        x, y = center
        size = 12
        offset = NODE_RADIUS + 5
        if marker is Marker.PRE:
            # Left side, pointing right
            points = [(x - offset - size, y - size // 2), (x - offset, y), (x - offset - size, y + size // 2)]
        elif marker is Marker.IN:
            # Below, pointing up
            points = [(x - size // 2, y + offset + size), (x, y + offset), (x + size // 2, y + offset + size)]
        else:
            # Right side, pointing left
            points = [(x + offset + size, y - size // 2), (x + offset, y), (x + offset + size, y + size // 2)]
        pygame.draw.polygon(self.screen, self.colors['marker'], points)

    def _draw_info_panel(self, render_data: Dict[str, Any]):
        """Draw information panel."""
        x_offset = 10
        y_offset = 10

        stats = render_data['stats']
        mode = render_data['step_mode']
        self._draw_text(f"Tree: {render_data['discipline'].value}", (x_offset, y_offset))
        y_offset += 25
        self._draw_text(f"Mode: {'Step' if mode is StepMode.MANUAL else 'Auto'}", (x_offset, y_offset))
        y_offset += 25
        self._draw_text(f"Height: {stats.height}  Nodes: {stats.count}  Leaves: {stats.leaves}",
                        (x_offset, y_offset))
        y_offset += 25
        self._draw_text(f"Input: {self.input_buffer}", (x_offset, y_offset))
        y_offset += 30

        # Controls
        for line in ("Digits + I/D/S: Insert/Delete/Search",
                     "P/O/U: Pre/In/Post order  B: Balance  C: Clear  R: Random",
                     "T: BST/AVL  M: Auto/Step  SPACE: Next step  ESC/Q: Quit"):
            self._draw_text(line, (x_offset, y_offset), self.small_font, self.colors['hint'])
            y_offset += 18

        if render_data['awaiting_advance']:
            self._draw_text("Press SPACE for the next step", (x_offset, y_offset + 10),
                            self.font, self.colors['marker'])

        width, height = self.window_size
        if render_data['output_label']:
            sequence = " -> ".join(str(key) for key in render_data['output'])
            self._draw_text(f"{render_data['output_label']}: {sequence}", (x_offset, height - 30))

        message = render_data['rotation_message']
        if message:
            surface = self.font.render(message, True, self.colors['message'])
            self.screen.blit(surface, surface.get_rect(center=(width // 2, height - 70)))

    def render_frame(self, render_data: Dict[str, Any]) -> bool:
        """
        Draw one frame.

        Args:
            render_data: Render data from TreeEngine.get_render_data()

        Returns:
            True if should continue, False if should quit
        """
        # Clear screen
        self.screen.fill(self.colors['background'])

        for start, end in render_data['edges']:
            pygame.draw.line(self.screen, self.colors['edge'],
                             self._screen_pos(start), self._screen_pos(end), 3)

        for node in render_data['nodes']:
            self._draw_node(node['key'], node['position'], node['highlight'], node['marker'])

        pending = render_data['pending']
        if pending is not None:
            self._draw_node(pending['key'], pending['position'])

        self._draw_info_panel(render_data)

        # Update display
        pygame.display.flip()
        return True

    def finish(self):
        """Close the framer."""
        pygame.quit()
