from rich import print

from argtrellis import ArgParser, MANDATORY, OPTIONAL, chain, existing, integer, within

parser = ArgParser(help=True)

power = parser.complex(
    "-p", OPTIONAL, "Specify power output.",
    lambda key: print("Triggered power flag"),
)
watts = power.argument(
    "number_watts", MANDATORY, "An integer representing the number of watts.",
    chain(integer, within(0, 50)),
)

speed = parser.complex("--speed", MANDATORY, "Specify the speed.")
pace = speed.exclusive(MANDATORY)
slow = pace.flag("slow")
medium = pace.flag("medium")
fast = pace.flag("fast")

file = parser.complex("--file", OPTIONAL, "Read the specified file.")
path = file.argument("file_path", MANDATORY, "Path to an existing file.", existing)


if __name__ == '__main__':
    parser.validate()

    if power:
        print(f"Accepted power output of {watts.value} W")
    if slow:
        print("Running slowly.")
    elif medium:
        print("Running normally.")
    elif fast:
        print("Running fast.")
