# tsm/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Callable

StateName = str

# Callback Types
LogHandler = Callable[[str], None]
