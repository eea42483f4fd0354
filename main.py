#!/usr/bin/env python3

##############################################
#                                            #
#         HELLO WORLD REACT AGENT            #
#                                            #
##############################################

import os

from dotenv import load_dotenv

from agents.prebuilt import LiteLLMReActAgent
from examples.tools.calculator import CalculatorTool
from examples.tools.temperature import TemperatureConverterTool
from utils.cli import print_event, print_result, read_user_goal
from utils.load_config import load_config
from utils.observability import setup_telemetry

from utils.logger import get_logger, init_logger
logger = get_logger(__name__)


def main() -> None:
    init_logger("config.json")
    load_dotenv()
    if os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"):
        setup_telemetry()

    config = load_config()
    agent = LiteLLMReActAgent(
        tools=[CalculatorTool(), TemperatureConverterTool()],
        config=config,
    )
    # Or assemble your own agent as follows:
    # agent = ReActAgent(
    #     LiteLLM(model=os.getenv("LLM_MODEL", "claude-sonnet-4")),
    #     tools=[CalculatorTool()],
    #     config=ReasonerConfig(max_iterations=5),
    # )
    logger.info("🤖 Agent started. Enter tasks to get started…")

    while True:
        task = None
        try:
            task = read_user_goal()
            if not task:  # Skip empty inputs
                continue

            result = agent.run(task, event_sink=print_event)
            print_result(result)

        except KeyboardInterrupt:
            logger.info("🤖 Bye!")
            break

        except Exception as exc:
            logger.exception("run_failed", task=task, error=str(exc))


if __name__ == "__main__":
    main()
