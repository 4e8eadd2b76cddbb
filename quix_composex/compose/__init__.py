#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Docker compose definitions imported into Quix Compose-X objects
"""
