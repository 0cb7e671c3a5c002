"""Demo script for the BST trainer with optional animation."""

import asyncio
import sys
from bsttrainer import (Renderer, TreeEngine, StepGate, Discipline,
                        create_default_config, create_fast_config)
from controller import Controller, Logger


async def run_headless():
    """Scripted session without a window or delays."""
    config = create_fast_config()
    logger = Logger(log_visits=False)
    logger.log_config(config)

    engine = TreeEngine(config, StepGate(config.step_duration))
    controller = Controller(engine, logger=logger)

    await controller.set_discipline(Discipline.AVL)
    for text in ["50", "30", "70", "20", "40", "60", "80", "10", "5", "abc"]:
        await controller.insert(text)

    print(f"PreOrder:  {await controller.pre_order()}")
    print(f"InOrder:   {await controller.in_order()}")
    print(f"PostOrder: {await controller.post_order()}")

    await controller.search("40")
    await controller.search("99")
    await controller.delete("50")
    await controller.balance()

    logger.log_final(engine)


async def run_interactive():
    """Interactive session in a pygame window."""
    # Imported here so headless runs work without a display
    from controller.animator import Animator

    print("=" * 60)
    print("BST Trainer - Binary Search Tree / AVL Tree Visualizer")
    print("=" * 60)
    print("Controls:")
    print("  Digits, then I / D / S: Insert / Delete / Search")
    print("  P / O / U: PreOrder / InOrder / PostOrder")
    print("  B: Balance   C: Clear   R: Random tree")
    print("  T: Toggle BST/AVL   M: Toggle Auto/Step mode")
    print("  SPACE or N: Next step   ESC or Q: Quit")
    print("=" * 60)

    config = create_default_config()
    logger = Logger()
    logger.log_config(config)

    engine = TreeEngine(config, StepGate(config.step_duration))
    controller = Controller(engine, logger=logger)

    animator = Animator(controller)
    renderer = Renderer(engine, render_callback=animator, fps=60)

    animator.start()
    renderer.start()
    try:
        await renderer.wait_for_stop()
    except KeyboardInterrupt:
        print("\nSession interrupted by user.")
    finally:
        renderer.stop()
        animator.finish()
        logger.log_final(engine)


if __name__ == "__main__":
    headless = len(sys.argv) > 1 and sys.argv[1] == "--headless"
    asyncio.run(run_headless() if headless else run_interactive())
