#!/usr/bin/env python3
"""
Demonstration of client-side link resolution on an offline payload.

Shows the behaviours that matter when consuming resolved responses:
shared instances, circular references, unresolved links and locale-keyed
fields. No credentials or network access are needed.
"""

import argparse

from content_delivery.core.delivery_api import ResolveOptions, resolve_response


def link(link_type, id):
    return {"sys": {"type": "Link", "linkType": link_type, "id": id}}


SAMPLE_RESPONSE = {
    "sys": {"type": "Array"},
    "total": 2,
    "skip": 0,
    "limit": 100,
    "items": [
        {
            "sys": {"type": "Entry", "id": "farm"},
            "fields": {
                "name": {"en-US": "Old MacDonald's", "de-DE": "Der Bauernhof"},
                "animals": {"en-US": [link("Entry", "oink"), link("Entry", "parrot"), link("Entry", "unicorn")]},
                "logo": {"en-US": link("Asset", "logo")},
            },
        },
        {
            "sys": {"type": "Entry", "id": "parrot"},
            "fields": {"name": {"en-US": "Parrot"}, "friend": {"en-US": link("Entry", "oink")}},
        },
    ],
    "includes": {
        "Entry": [
            {
                "sys": {"type": "Entry", "id": "oink"},
                "fields": {"name": {"en-US": "Pig"}, "friend": {"en-US": link("Entry", "parrot")}},
            },
        ],
        "Asset": [
            {"sys": {"type": "Asset", "id": "logo"}, "fields": {"file": {"en-US": {"url": "//images/logo.png"}}}},
        ],
    },
}


def main() -> None:
    parser = argparse.ArgumentParser(description="Demonstrate link resolution on a sample payload")
    parser.add_argument("--remove-unresolved", action="store_true")
    args = parser.parse_args()

    collection = resolve_response(SAMPLE_RESPONSE, ResolveOptions(remove_unresolved=args.remove_unresolved))
    farm, parrot = collection["items"]
    animals = farm["fields"]["animals"]["en-US"]

    print("🔗 Link resolution demo")
    print("=" * 60)
    print(f"Farm: {farm['fields']['name']['en-US']}")
    print(f"Logo: {farm['fields']['logo']['en-US']['fields']['file']['en-US']['url']}")
    print(f"Animals ({len(animals)}):")
    for animal in animals:
        if animal["sys"]["type"] == "Link":
            print(f"  - unresolved link to {animal['sys']['id']}")
        else:
            print(f"  - {animal['fields']['name']['en-US']}")

    pig = animals[0]
    print()
    print(f"Parrot in items is the parrot in the list: {animals[1] is parrot}")
    print(f"Pig's friend's friend is the pig: {pig['fields']['friend']['en-US']['fields']['friend']['en-US'] is pig}")
    print()
    print("Serialised with circular references cut:")
    print(collection.stringify_safe(indent=2))


if __name__ == "__main__":
    main()
