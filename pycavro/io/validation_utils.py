import difflib
import logging

LOG_LEVEL_IO = 5
logging.addLevelName(LOG_LEVEL_IO, "IO")


def describe_mismatch(expected: bytes, actual: bytes) -> str:
  """Show two frames one above the other, with ``^`` under every byte that differs.

  Bytes are printed the way ``repr`` prints them, so control characters stay readable, e.g.::

    expected: /1S20R\\r
    actual:   /1S30R\\r
                 ^
  """
  exp = [repr(bytes([b]))[2:-1] for b in expected]
  act = [repr(bytes([b]))[2:-1] for b in actual]

  line_exp, line_act, markers = [], [], []
  matcher = difflib.SequenceMatcher(a=exp, b=act, autojunk=False)
  for tag, i1, i2, j1, j2 in matcher.get_opcodes():
    exp_part, act_part = exp[i1:i2], act[j1:j2]
    # pad the shorter side so both lines stay aligned
    while len(exp_part) < len(act_part):
      exp_part.append("-")
    while len(act_part) < len(exp_part):
      act_part.append("-")
    for e, a in zip(exp_part, act_part):
      width = max(len(e), len(a))
      line_exp.append(e.ljust(width))
      line_act.append(a.ljust(width))
      markers.append((" " if tag == "equal" else "^") * width)

  return "\n".join(
    [
      "expected: " + "".join(line_exp),
      "actual:   " + "".join(line_act),
      "          " + "".join(markers).rstrip(),
    ]
  )
