#!/usr/bin/env python3
"""
Seed sample experiences (already approved) for local development.

Usage: python scripts/seed_experiences.py [--reset]
"""
import argparse
import sys
sys.path.insert(0, '.')

from experience_portal.db.mongodb import get_collection, init_mongo_indexes
from experience_portal.services.experience_service import ExperienceStore, APPROVED

SAMPLE_EXPERIENCES = [
    {
        "company": "Google",
        "role": "Software Engineer",
        "branch": "Computer Science",
        "year": 2024,
        "rounds": [
            {
                "round_name": "Online Assessment",
                "questions": [
                    "Given an array of integers, find the maximum sum of contiguous subarray",
                    "Design a system to handle 1 million requests per second",
                ],
                "feedback": "Focus on time complexity and edge cases",
                "difficulty": "Medium",
            },
            {
                "round_name": "Technical Interview",
                "questions": [
                    "Explain how HashMap works internally",
                    "Implement a binary search tree",
                    "Given two sorted arrays, merge them in O(n) time",
                ],
                "feedback": "Interviewer was helpful. Covered DSA fundamentals well.",
                "difficulty": "Medium",
            },
            {
                "round_name": "System Design",
                "questions": [
                    "Design a URL shortener like bit.ly",
                    "How would you scale it to handle billions of requests?",
                ],
                "feedback": "Discussed distributed systems and caching strategies",
                "difficulty": "Hard",
            },
        ],
        "package": "35 LPA",
        "tips": "Practice system design questions. Focus on distributed systems and scalability.",
        "offer_status": "Selected",
        "author_name": "Student A",
    },
    {
        "company": "Microsoft",
        "role": "Software Development Engineer",
        "branch": "Computer Science",
        "year": 2024,
        "rounds": [
            {
                "round_name": "Coding Round",
                "questions": [
                    "Find all permutations of a string",
                    "Implement LRU Cache",
                    "Reverse a linked list in groups of k",
                ],
                "feedback": "Medium difficulty. Expected optimized solutions.",
                "difficulty": "Medium",
            },
            {
                "round_name": "Technical Interview",
                "questions": [
                    "Explain ACID properties in databases",
                    "What is the difference between REST and GraphQL?",
                    "Design a parking lot system",
                ],
                "feedback": "Interview focused on problem-solving approach",
                "difficulty": "Medium",
            },
        ],
        "package": "28 LPA",
        "tips": "Strong emphasis on clean code and design patterns. Brush up on OOP concepts.",
        "offer_status": "Selected",
        "author_name": "Student B",
    },
    {
        "company": "Amazon",
        "role": "Software Development Engineer",
        "branch": "Electronics Engineering",
        "year": 2024,
        "rounds": [
            {
                "round_name": "Online Assessment",
                "questions": [
                    "Find longest palindromic subsequence",
                    "Minimum path sum in a grid",
                    "Design a rate limiter",
                ],
                "feedback": "Time-bound questions. Practice speed coding.",
                "difficulty": "Hard",
            },
            {
                "round_name": "Bar Raiser",
                "questions": [
                    "Tell me about a time you disagreed with your manager",
                    "Explain how you would design Amazon's order tracking",
                ],
                "feedback": "Leadership principles matter as much as coding.",
                "difficulty": "Medium",
            },
        ],
        "package": "32 LPA",
        "tips": "Prepare STAR stories for every leadership principle.",
        "offer_status": "Selected",
        "author_name": "Student C",
    },
]


def main():
    parser = argparse.ArgumentParser(description="Seed sample experiences")
    parser.add_argument("--reset", action="store_true", help="delete existing experiences first")
    args = parser.parse_args()

    collection = get_collection("experiences")
    if args.reset:
        deleted = collection.delete_many({}).deleted_count
        print(f"🗑️  Removed {deleted} experiences")

    init_mongo_indexes()
    store = ExperienceStore(collection)
    for sample in SAMPLE_EXPERIENCES:
        data = {k: v for k, v in sample.items() if k != "author_name"}
        experience = store.create(data, author_id=None, author_name=sample["author_name"])
        store.set_moderation(experience["id"], APPROVED, "Seed data", admin_id=None)
        print(f"✅ {experience['company']} / {experience['role']} ({experience['id']})")

    print(f"\nSeeded {len(SAMPLE_EXPERIENCES)} experiences")


if __name__ == "__main__":
    main()
