from abc import ABC, abstractmethod

class SchedulerPort(ABC):
    @abstractmethod
    def start(self):
        """Inicia a execução periódica do job"""
        pass

    @abstractmethod
    def stop(self):
        """Para o loop do agendador"""
        pass
