import sys
import os

# Ensure botflow is in path
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from botflow.frontend import FlowGraphBuilder
from botflow.engine import ConversationSession, RecordingSink


def main():
    print("Building flow graph...")
    b = FlowGraphBuilder("Pizza Order", graph_id="pizza")
    b.variable("Size")

    start = b.block("Start")
    start_step = b.step(start, "start")

    choose = b.block("Choose pizza")
    b.step(choose, "text", text="Which pizza would you like?")
    pick = b.step(choose, "input", variable="Size")

    delivery = b.block("Delivery")
    address = b.step(delivery, "input", text="Where should we deliver?")
    confirm = b.step(delivery, "text", text="On its way!")

    b.connect(start_step, choose)
    b.connect(pick, delivery)
    # Skips the address question and lands on the confirmation
    b.connect(address, delivery, target_step=confirm, edge_id="skip-address")

    graph = b.build()
    print(f"Flow graph built with {len(graph.blocks)} blocks and {len(graph.edges)} edges.")

    print("\nRunning conversation...")
    sink = RecordingSink()
    session = ConversationSession(graph, sink=sink, predefined_variables={"size": "large"})
    session.start()
    session.advance(pick.outgoing_edge_id)
    session.advance("skip-address")
    session.advance("no-such-edge")

    for entry in session.history:
        print(f"  {entry.block.title} (from step {entry.start_step_index})")
    print(f"Prefilled: {[(v.name, v.value) for v in session.prefilled_variables]}")
    print(f"Completed: {sink.completed}")


if __name__ == "__main__":
    main()
