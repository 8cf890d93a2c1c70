import asyncio
import sys
import threading
import time

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from config.config import Config
from models.pipeline_state import PipelineState
from orchestrator.core import InvestigationPipeline


def show_loading_animation(stop_event: threading.Event) -> None:
    """
    Show a loading animation in the console.

    Args:
        stop_event: A threading.Event that will be set to stop the animation
    """
    while not stop_event.is_set():
        for char in '|/-\\':
            if stop_event.is_set():
                break
            sys.stdout.write(f'\r\033[93mAccessing global databases {char}\033[0m')
            sys.stdout.flush()
            time.sleep(0.1)

    sys.stdout.write('\r' + ' ' * 40 + '\r')
    sys.stdout.flush()


def render_state(state: PipelineState) -> str:
    """
    Render a finished pipeline state as console text.

    Args:
        state: The pipeline's current state

    Returns:
        The report with numbered sources, the error message, or a placeholder
    """
    if state.is_failed:
        return f"Error: {state.error.message}"

    if not state.is_succeeded:
        return "No active investigation. Enter a name to begin."

    result = state.result
    lines = [
        f"=== Intelligence Report: {state.subject} ===",
        f"Report generated: {result.timestamp}",
        "",
        result.summary,
        "",
        "=== Data Sources ===",
    ]
    if not result.sources:
        lines.append("No sources indexed.")
    for i, source in enumerate(result.sources, start=1):
        lines.append(f"[{i:02d}] {source.title or 'Untitled'}")
        lines.append(f"     {source.uri}")
    return "\n".join(lines)


def run_investigation(runner: asyncio.Runner, pipeline: InvestigationPipeline, subject: str) -> None:
    # Show loading animation in a separate thread
    stop_animation = threading.Event()
    loading_thread = threading.Thread(target=show_loading_animation, args=(stop_animation,))
    loading_thread.daemon = True
    loading_thread.start()

    try:
        runner.run(pipeline.investigate(subject))
    finally:
        stop_animation.set()
        loading_thread.join()


def main():
    config = Config()
    if not config.validate():
        print("Error: GEMINI_API_KEY is not set. Please set it in the .env file.")
        return

    pipeline = InvestigationPipeline.from_config(config)

    print(f"\n=== Public Record Investigator ({config.get_model_info()}) ===")
    print("Enter a subject name to search public records, 'help' for commands\n")

    # One event loop for the session so the async provider client is reused
    with asyncio.Runner() as runner:
        run_loop(runner, pipeline)


def run_loop(runner: asyncio.Runner, pipeline: InvestigationPipeline) -> None:
    while True:
        try:
            user_input = input("Subject: ").strip()

            if not user_input:
                continue

            if user_input.lower() in ('exit', 'quit'):
                print("\nGoodbye!")
                break

            if user_input.lower() == 'help':
                print("\n=== Available Commands ===")
                print("help      - Show this help message")
                print("exit/quit - Exit the program")
                print("Anything else is investigated as a subject name.")
                print("Public data only. Do not use for tracking or harassment.\n")
                continue

            run_investigation(runner, pipeline, user_input)
            print(f"\n{render_state(pipeline.current_state)}\n")

        except KeyboardInterrupt:
            print("\nExiting...")
            break


if __name__ == "__main__":
    main()
