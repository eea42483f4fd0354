"""CLI utility functions for user interaction."""
import sys

from agents.models import Event, EventType
from agents.reasoner.models import Result

_EVENT_ICONS = {
    EventType.THOUGHT: "💭",
    EventType.ACTION: "🔧",
    EventType.OBSERVATION: "👀",
    EventType.FINAL_ANSWER: "✅",
    EventType.ERROR: "⚠️",
}


def read_user_goal(prompt: str = "🤖 Enter your task: ") -> str:
    """Read a task from user input via stdin."""
    print(prompt, end="", flush=True)
    line = sys.stdin.readline()
    if not line:  # EOF
        raise KeyboardInterrupt

    goal = line.strip()
    if goal.lower() in {"bye", "quit", "exit", "q"}:
        raise KeyboardInterrupt
    return goal


def print_event(event: Event) -> None:
    """Event sink that echoes the loop's progress."""
    if event.type == EventType.FINAL_ANSWER:
        return
    content = event.content
    if event.type == EventType.ACTION:
        content = f"{content.tool} {content.parameters}"
    print(f"{_EVENT_ICONS.get(event.type, '•')} {content}")


def print_result(result: Result) -> None:
    """Print the reasoning result to stdout."""
    if result.successful:
        print(f"✅ **Answer:** {result.final_answer}")
        tools_used = [t.action.tool for t in result.thoughts if t.action is not None]
        if tools_used:
            print(f"\n📋 **Used {len(tools_used)} tool(s) in {result.iterations} step(s):**")
            for i, tool_name in enumerate(tools_used, 1):
                print(f"  {i}. {tool_name}")
    else:
        print(f"❌ **{result.summary()}**")
        if result.final_answer:
            print(f"   {result.final_answer}")

    details = result.execution_details()
    print(f"\n   confidence={details['confidence']} time={details['time']}")
