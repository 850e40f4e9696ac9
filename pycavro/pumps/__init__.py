from .backend import SyringePumpBackend
from .chatterbox import SyringePumpChatterboxBackend
from .standard import ValvePosition
from .syringe_pump import SyringePump
from .cavro import CavroBackend
