#!/usr/bin/env python3
"""
Examples of using graphmaker.

Run this file to print pinned records and connector paths for a few graphs.
"""

from graphmaker import GraphMaker


def show(title, input_text, **options):
    print(title)
    print("-" * len(title))

    maker = GraphMaker(**options)
    diagram = maker.load(input_text)
    routes = diagram.route()

    print(f"Mode: {diagram.mode}")
    print("Records:")
    for line in maker.save(diagram).split("\n"):
        print(f"  {line}")
    print("Connectors:")
    for route in routes.routes:
        trunk = " (trunk)" if route.via_trunk else ""
        print(f"  {route.edge.id:<8} {route.color}  {route.svg_path()}{trunk}")
    for edge in routes.unresolved:
        print(f"  {edge.id:<8} unresolved")
    print()


def example_diamond():
    """Two branches merging into one leaf"""
    show(
        "Example 1: Diamond",
        """
        0,Root,1;2
        1,Foo,3
        2,Bar,3
        3,Buzz,
        """,
    )


def example_org_chart():
    """Wide tree with one shared channel per level"""
    show(
        "Example 2: Org Chart",
        """
        ceo,CEO,cto;cfo;coo
        cto,CTO,eng;ops
        cfo,CFO,
        coo,COO,ops
        eng,Engineering,
        ops,Operations,
        """,
    )


def example_cycle():
    """Retry loop, laid out without hanging"""
    show(
        "Example 3: Retry Loop",
        """
        req,Request,validate
        validate,Validate,process;error
        process,Process,
        error,Error Handler,retry
        retry,Retry,validate
        """,
    )


def example_pinned():
    """Persisted positions and spread ports"""
    show(
        "Example 4: Pinned Positions",
        """
        a,Source,b;c;d,0;0
        b,Left,,-250;200
        c,Middle,,0;200
        d,Right,,250;200
        """,
        spread_source_ports=True,
    )


def main():
    """Run all examples."""
    print("=" * 50)
    print("graphmaker Examples")
    print("=" * 50)
    print()

    example_diamond()
    example_org_chart()
    example_cycle()
    example_pinned()


if __name__ == "__main__":
    main()
