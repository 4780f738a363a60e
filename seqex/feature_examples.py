#
#   Copyright 2025 Hopsworks AB
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#

"""Canned feature maps of real DNB ad requests, used to smoke test deployments."""

import copy
from typing import Dict, List


FEATURE_NAMES = (
    "ad_type",
    "adsuuid",
    "ageRange",
    "city",
    "feed_fetch_counter",
    "gender",
    "language",
    "osVersion",
    "phoneCarrier",
    "phoneModel",
    "sourceApp",
    "state",
    "time",
    "userid",
)


def _example(*values: str) -> Dict[str, List[str]]:
    return {name: [value] for name, value in zip(FEATURE_NAMES, values)}


REFERENCE_EXAMPLE = _example(
    "SC_CPCV_1",
    "0532afbb-3c85-4776-b5c6-d908a47c1441",
    "18-24",
    "koppal",
    "1",
    "F",
    "tamil",
    "rest",
    "ind airtel",
    "oppo cph2681",
    "SC",
    "karnataka",
    "2025-10-10 22:02:24",
    "749603295",
)

# ad_type, adsuuid, ageRange, city, feed_fetch_counter, gender, language,
# osVersion, phoneCarrier, phoneModel, sourceApp, state, time, userid
_EXAMPLES = (
    _example(
        "SC_CPCV_2", "aa8e7f93-7f33-469f-81b0-fb2146e5ee4e", "25-34", "mumbai",
        "2", "M", "punjabi", "rest", "airtel", "samsung sm-g960w", "SC",
        "maharashtra", "2025-10-20 15:34:24", "2356401887",
    ),
    _example(
        "Moj-Exit-Interstitial", "", "18-24", "thane", "", "M", "marathi",
        "android 8.0.0 (26)", "vodafone in", "sm-j600g", "MJ", "maharashtra",
        "2025-10-20 11:50:14", "59834594701",
    ),
    _example(
        "SC_OUTSTREAM_NON_INFEED", "", "25-34", "mysuru", "", "F", "tamil",
        "android 13 (33)", "airtel", "v2240", "SC", "karnataka",
        "2025-10-20 07:58:59", "1197256433",
    ),
    _example(
        "SC_OUTSTREAM", "593c192b-bde2-4af5-80b6-495480ee3407", "25-34", "dahod",
        "1", "M", "gujarati", "rest", "jio 4g", "vivo vivo 1820", "SC",
        "gujarat", "2025-10-20 08:08:45", "2089988753",
    ),
    _example(
        "Moj-Share-Screen-Interstitial", "", "18-24", "amritsar", "", "M",
        "hindi", "android 15 (35)", "jio 4g", "sm-e055f", "MJ", "punjab",
        "2025-10-20 21:20:28", "75424155751",
    ),
    _example(
        "SC_OUTSTREAM_NON_INFEED", "", "45-100", "satna", "", "F", "hindi",
        "android 10 (29)", "vi india | idea", "samsung sm-m305f", "SC",
        "madhya pradesh", "2025-10-20 08:35:03", "986973372",
    ),
    _example(
        "SC_OUTSTREAM", "7fd28b76-0a12-4359-8d83-9bb078bff122", "rest",
        "thiruvananthapuram", "3", "rest", "malayalam", "rest", "jio 4g",
        "realme rmx3231", "SC", "kerala", "2025-10-20 20:01:40", "2118385968",
    ),
    _example(
        "SC_CPCV_1", "a90046f2-ecb1-48ad-be71-6055f5520bfe", "25-34", "kollam",
        "1", "F", "tamil", "rest", "ind airtel", "oppo cph2665", "SC", "kerala",
        "2025-10-20 18:20:31", "964202151",
    ),
    _example(
        "SC_OUTSTREAM", "8ea67a61-30cd-4f91-a3d3-08fb884aed74", "18-24",
        "west godavari", "4", "M", "telugu", "rest", "jio 4g",
        "lava lava lxx504", "SC", "andhra pradesh", "2025-10-20 15:21:13",
        "3767690203",
    ),
    _example(
        "MOJ_CPCV_2", "98729a04-d62f-4abf-a806-16af64da2dbe", "18-24", "gondia",
        "2", "M", "hindi", "android 14 (34)", "jio true5g", "v2253", "MJ",
        "madhya pradesh", "2025-10-20 08:04:36", "13436156741",
    ),
)


def get_count() -> int:
    return len(_EXAMPLES)


def get_example(index: int = 0) -> Dict[str, List[str]]:
    """Copy of the example at `index`, 0 based.

    # Raises
        `IndexError`: If `index` is out of range. Negative indices are not accepted.
    """
    if not 0 <= index < len(_EXAMPLES):
        raise IndexError(
            "Invalid example index: {}. Valid range: 0-{}".format(
                index, len(_EXAMPLES) - 1
            )
        )
    return copy.deepcopy(_EXAMPLES[index])


def get_all() -> List[Dict[str, List[str]]]:
    return [copy.deepcopy(example) for example in _EXAMPLES]
